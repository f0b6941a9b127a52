"""
Pytest configuration and fixtures for rates bridge tests.
"""
import os
from typing import Dict, List, Optional

import pytest

# Set test environment before importing app modules
os.environ["SS_API_KEY"] = "test-key"
os.environ["SS_API_SECRET"] = "test-secret"
os.environ["CS_USER"] = ""
os.environ["MARKUP_PERCENT"] = "0"

from rates_bridge.core.exceptions import CarrierRateError
from rates_bridge.modules.shipping.models import (
    Carrier,
    NormalizedShipment,
    PackageDimensions,
    PostalAddress,
    ProviderRate,
)
from rates_bridge.services.rate_quote_service import RateQuoteService


class FakeShipStationClient:
    """
    In-memory stand-in for ShipStationClient.

    rates_by_carrier maps carrier code -> list of rate dicts, or an Exception
    instance to raise for that carrier.
    """

    def __init__(self, carriers: List[Dict], rates_by_carrier: Optional[Dict] = None, carriers_error=None):
        self.carriers = carriers
        self.rates_by_carrier = rates_by_carrier or {}
        self.carriers_error = carriers_error
        self.shipments: List[NormalizedShipment] = []
        self.requested: List[str] = []
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    async def list_active_carriers(self) -> List[Carrier]:
        if self.carriers_error:
            raise self.carriers_error
        return [Carrier.from_dict(c) for c in self.carriers]

    async def get_rates(self, carrier_code: str, shipment: NormalizedShipment) -> List[ProviderRate]:
        self.requested.append(carrier_code)
        self.shipments.append(shipment)
        result = self.rates_by_carrier.get(carrier_code, [])
        if isinstance(result, Exception):
            raise result
        return [ProviderRate.from_dict(r, carrier_code=carrier_code) for r in result]


@pytest.fixture
def origin() -> PostalAddress:
    return PostalAddress(postal_code="60462", state="IL", country_code="US")


@pytest.fixture
def dimensions() -> PackageDimensions:
    return PackageDimensions(length=8, width=6, height=4, units="inch")


@pytest.fixture
def make_service(origin, dimensions):
    """Build a RateQuoteService wired to a FakeShipStationClient."""

    def _make(fake_client, markup_percent=0, api_key="key", api_secret="secret", **kwargs):
        return RateQuoteService(
            api_key=api_key,
            api_secret=api_secret,
            origin=origin,
            dimensions=dimensions,
            markup_percent=markup_percent,
            client_factory=lambda: fake_client,
            **kwargs
        )

    return _make


@pytest.fixture
def sample_payload() -> dict:
    """Shopify CarrierService callback body."""
    return {
        "rate": {
            "origin": {"postal_code": "99999", "country": "US"},
            "destination": {
                "postal_code": "10001",
                "province": "NY",
                "country": "US",
            },
            "items": [{"grams": 500, "quantity": 1, "name": "Comic Bag"}],
            "currency": "USD",
        }
    }


@pytest.fixture
def two_carrier_client() -> FakeShipStationClient:
    return FakeShipStationClient(
        carriers=[{"carrierCode": "stamps_com"}, {"carrierCode": "ups_walleted"}],
        rates_by_carrier={
            "stamps_com": [{"serviceName": "USPS Priority Mail", "serviceCode": "usps_priority_mail", "shipmentCost": 5.00}],
            "ups_walleted": [{"serviceName": "UPS Ground", "serviceCode": "ups_ground", "shipmentCost": 7.50}],
        },
    )


@pytest.fixture
def failing_carrier_error() -> CarrierRateError:
    return CarrierRateError("fedex", status_code=500, body="Internal Server Error")
