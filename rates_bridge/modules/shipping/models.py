"""
Rate Quoting Data Classes

Request-scoped shapes that flow through the quoting pipeline:

    ShipmentRequest -> NormalizedShipment -> ProviderRate -> CanonicalRate

Nothing here is cached or persisted between requests.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


def first_present(*values: Any, default: Any = None) -> Any:
    """Return the first truthy value, left to right, else default."""
    for value in values:
        if value:
            return value
    return default


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# =============================================================================
# Inbound
# =============================================================================

@dataclass(frozen=True)
class PostalAddress:
    """Address fields ShipStation needs for rating."""
    postal_code: str = ""
    state: str = ""
    country_code: str = ""


@dataclass(frozen=True)
class LineItem:
    """A cart line; only its mass matters for rating."""
    grams: float = 0.0


@dataclass(frozen=True)
class ShipmentRequest:
    """A rate request after translation from the caller's payload."""
    origin: PostalAddress
    destination: PostalAddress
    items: Tuple[LineItem, ...] = ()

    @property
    def total_grams(self) -> float:
        return sum(item.grams for item in self.items)


# =============================================================================
# Outbound (ShipStation)
# =============================================================================

@dataclass(frozen=True)
class Weight:
    value: float
    units: str = "ounces"


@dataclass(frozen=True)
class PackageDimensions:
    length: float
    width: float
    height: float
    units: str = "inch"


@dataclass(frozen=True)
class NormalizedShipment:
    """
    Shipment description sent to every carrier.

    Built once per request and shared read-only by all carrier calls so that
    every carrier quotes against the identical shipment.
    """
    origin: PostalAddress
    destination: PostalAddress
    weight: Weight
    dimensions: PackageDimensions
    residential: bool = True

    def to_getrates_body(self, carrier_code: str) -> Dict[str, Any]:
        """Serialize for POST /shipments/getrates."""
        return {
            "carrierCode": carrier_code,
            "fromPostalCode": self.origin.postal_code,
            "fromState": self.origin.state,
            "fromCountryCode": self.origin.country_code,
            "toState": self.destination.state,
            "toCountryCode": self.destination.country_code,
            "toPostalCode": self.destination.postal_code,
            "residential": self.residential,
            "weight": {"value": self.weight.value, "units": self.weight.units},
            "dimensions": {
                "units": self.dimensions.units,
                "length": self.dimensions.length,
                "width": self.dimensions.width,
                "height": self.dimensions.height,
            },
        }


@dataclass(frozen=True)
class Carrier:
    """Active carrier account returned by GET /carriers."""
    code: Optional[str]
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Carrier":
        return cls(
            code=_clean_str(first_present(data.get("carrierCode"), data.get("code"))),
            name=_clean_str(data.get("name")),
        )


@dataclass(frozen=True)
class ProviderRate:
    """One (carrier, service) quote as ShipStation returned it."""
    carrier_code: Optional[str] = None
    service_code: Optional[str] = None
    service_name: Optional[str] = None
    carrier_name: Optional[str] = None
    shipment_cost: Any = None
    shipping_amount: Any = None
    delivery_days: Any = None

    @property
    def amount(self) -> Any:
        """Primary cost field, then the secondary one, then 0."""
        return first_present(self.shipment_cost, self.shipping_amount, default=0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], carrier_code: Optional[str] = None) -> "ProviderRate":
        """
        Build from a getrates record.

        carrier_code fills in for records that do not echo it back.
        """
        return cls(
            carrier_code=first_present(data.get("carrierCode"), carrier_code),
            service_code=data.get("serviceCode"),
            service_name=data.get("serviceName"),
            carrier_name=data.get("carrierFriendlyName"),
            shipment_cost=data.get("shipmentCost"),
            shipping_amount=data.get("shippingAmount"),
            delivery_days=data.get("deliveryDays"),
        )


# =============================================================================
# Caller-facing
# =============================================================================

@dataclass
class CanonicalRate:
    """Shipping option in the shape the checkout platform expects."""
    service_name: str
    service_code: str
    total_price: int
    currency: str = "USD"
    delivery_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "service_name": self.service_name,
            "service_code": self.service_code,
            "total_price": self.total_price,
            "currency": self.currency,
        }
        if self.delivery_date is not None:
            data["delivery_date"] = self.delivery_date
        return data
