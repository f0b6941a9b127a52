"""
CarrierService Rate Schemas

Response models for the Shopify CarrierService callback. The request body is
parsed leniently inside the route so malformed input still gets a 200.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from rates_bridge.modules.shipping.models import CanonicalRate


class RateResponse(BaseModel):
    """A single shipping option."""
    service_name: str
    service_code: str = Field(..., description="carrierCode:serviceCode")
    total_price: int = Field(..., ge=0, description="Minor currency units")
    currency: str = "USD"
    delivery_date: Optional[str] = Field(None, description="ISO-8601, omitted when unknown")

    @classmethod
    def from_rate(cls, rate: CanonicalRate) -> "RateResponse":
        return cls(**rate.to_dict())


class RateListResponse(BaseModel):
    """Shipping options, cheapest first."""
    rates: List[RateResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
