from fastapi import HTTPException
from .errors import MarketplaceError


def ensure_not_none(value, message: str):
    if value is None:
        raise HTTPException(status_code=404, detail=message)
    return value


def to_http(e: MarketplaceError) -> HTTPException:
    # Internal failures stay opaque to callers; details are in the logs
    detail = "internal error" if e.status_code >= 500 else e.message
    return HTTPException(status_code=e.status_code, detail=detail)
