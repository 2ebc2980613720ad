"""Domain errors raised by the payment and deposit services.

Each error carries the HTTP status the API answers with, so routes can
translate it without a lookup table.
"""
from decimal import Decimal


class MarketplaceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class JobNotFound(MarketplaceError):
    status_code = 404

    def __init__(self, job_id: int):
        super().__init__(f"job id {job_id} not found, already paid, or not payable by this profile")
        self.job_id = job_id


class ProfileNotFound(MarketplaceError):
    status_code = 404

    def __init__(self, profile_id: int):
        super().__init__(f"profile id {profile_id} not found")
        self.profile_id = profile_id


class ContractNotFound(MarketplaceError):
    status_code = 404

    def __init__(self, contract_id: int):
        super().__init__(f"contract id {contract_id} not found")
        self.contract_id = contract_id


class NotOwner(MarketplaceError):
    status_code = 401


class InsufficientFunds(MarketplaceError):
    def __init__(self, job_id: int, price: Decimal, balance: Decimal):
        super().__init__(
            f"could not pay job id {job_id} because job costs {price} is bigger than balance {balance}"
        )
        self.job_id = job_id
        self.price = price
        self.balance = balance


class DepositCapExceeded(MarketplaceError):
    def __init__(self, outstanding: Decimal, projected: Decimal, ratio: float):
        super().__init__(
            f"could not deposit because total unpaid job costs {outstanding} are less than "
            f"{ratio:.0%} of the resulting balance {projected}"
        )
        self.outstanding = outstanding
        self.projected = projected
        self.ratio = ratio


class TransferFailed(MarketplaceError):
    status_code = 500

    def __init__(self, message: str = "transfer failed"):
        super().__init__(message)
