from datetime import datetime

from pydantic import BaseModel


class ExchangeRateResponse(BaseModel):
    code: str
    rate_to_reference: float
    updated_at: datetime

    class Config:
        from_attributes = True


class ExchangeRateListResponse(BaseModel):
    items: list[ExchangeRateResponse]
    reference_currency: str
