from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class Profile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    profession: str
    balance: float
    type: str


class Contract(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    terms: str
    status: str
    client_id: int
    contractor_id: int


class Job(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    price: float
    paid: bool
    payment_date: datetime | None = None
    contract_id: int


class DepositRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deposit_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, alias="depositAmount")


class BestProfession(BaseModel):
    profession: str
    earned: float


class BestClient(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_id: int = Field(..., serialization_alias="clientId")
    fullname: str
    paid: float
