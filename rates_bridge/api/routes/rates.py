"""
CarrierService Rates Route

POST /rates is called by Shopify during checkout. It always answers 200; the
worst case is an empty rate list so checkout never breaks on a quoting
failure.
"""
import logging

from fastapi import APIRouter, Depends, Request

from rates_bridge.api.deps import get_rate_quote_service, require_carrier_service_auth
from rates_bridge.core.exceptions import RatesBridgeError
from rates_bridge.schemas.rates import RateListResponse, RateResponse
from rates_bridge.services.rate_quote_service import RateQuoteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rates"], dependencies=[Depends(require_carrier_service_auth)])


@router.post(
    "/rates",
    response_model=RateListResponse,
    response_model_exclude_none=True,
)
async def get_rates(
    request: Request,
    service: RateQuoteService = Depends(get_rate_quote_service),
) -> RateListResponse:
    """Quote live ShipStation rates for a Shopify CarrierService callback."""
    try:
        payload = await request.json()
        rates = await service.quote_payload(payload)
        return RateListResponse(rates=[RateResponse.from_rate(r) for r in rates])
    except RatesBridgeError as e:
        logger.error(f"Rates error: {e.message}", extra={"error": e.to_dict()})
    except Exception as e:
        logger.error(f"Rates error: {e}")
    return RateListResponse(rates=[])
