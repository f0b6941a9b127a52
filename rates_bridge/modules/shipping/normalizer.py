"""
ShipStation rate -> Shopify CarrierService rate.

normalize() never raises: missing or malformed fields degrade to defaults.
"""
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from rates_bridge.modules.shipping.models import CanonicalRate, ProviderRate, first_present
from rates_bridge.modules.shipping.units import major_to_minor

DEFAULT_SERVICE_NAME = "Service"
DEFAULT_CARRIER_NAME = "Carrier"
UNKNOWN_CARRIER_CODE = "UNKNOWN"
RATE_CURRENCY = "USD"

_WHITESPACE = re.compile(r"\s+")


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _delivery_days(value: Any) -> Optional[float]:
    # bool is an int subclass but never a day count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value != value or value < 0:
        return None
    return value


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2026-10-21T14:03:00.000Z"""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize(rate: ProviderRate, now: Optional[datetime] = None) -> CanonicalRate:
    """
    Map one provider rate into the caller's canonical shape.

    Args:
        rate: Rate record from ShipStation
        now: Reference instant for delivery_date (defaults to current UTC time)

    Returns:
        CanonicalRate; delivery_date is None unless deliveryDays was a
        non-negative number
    """
    service_name = _text(first_present(
        _text(rate.service_name), _text(rate.service_code), default=DEFAULT_SERVICE_NAME,
    ))
    carrier_name = _text(first_present(
        _text(rate.carrier_name), _text(rate.carrier_code), default=DEFAULT_CARRIER_NAME,
    ))
    display_name = _WHITESPACE.sub(" ", f"{carrier_name} {service_name}")

    carrier_code = _text(rate.carrier_code) or UNKNOWN_CARRIER_CODE
    service_code = f"{carrier_code}:{_text(rate.service_code) or service_name}"

    canonical = CanonicalRate(
        service_name=display_name,
        service_code=service_code,
        total_price=max(0, major_to_minor(rate.amount)),
        currency=RATE_CURRENCY,
    )

    days = _delivery_days(rate.delivery_days)
    if days is not None:
        moment = now or datetime.now(timezone.utc)
        try:
            canonical.delivery_date = format_timestamp(moment + timedelta(days=days))
        except OverflowError:
            canonical.delivery_date = None

    return canonical
