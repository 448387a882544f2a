from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_current_owner_id, get_store
from app.schemas.exchange_rate import ExchangeRateListResponse, ExchangeRateResponse
from app.store import RecordStore

router = APIRouter(prefix="/exchange-rates", tags=["exchange-rates"])


@router.get("", response_model=ExchangeRateListResponse, dependencies=[Depends(get_current_owner_id)])
async def list_exchange_rates(store: RecordStore = Depends(get_store)):
    """Current rates to the reference currency, as last written by the refresh job."""
    rates = store.query("exchange_rates", order_by="code")
    return ExchangeRateListResponse(
        items=[ExchangeRateResponse.model_validate(r) for r in rates],
        reference_currency=settings.reference_currency,
    )
