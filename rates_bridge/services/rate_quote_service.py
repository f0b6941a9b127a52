"""
Rate Quote Service

Aggregates live rates from every carrier connected to the ShipStation
account:

1. Validate credentials
2. Build one NormalizedShipment for the request
3. Discover carriers (failure aborts)
4. Fetch + normalize per carrier, concurrently; a failing carrier
   contributes zero rates and never affects the others
5. Apply markup per rate
6. Sort by price, ties kept in carrier order

Usage:
    service = RateQuoteService.from_settings(settings)
    rates = await service.quote(request)
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from rates_bridge.core.config import Settings
from rates_bridge.core.exceptions import ConfigurationError, ProviderError
from rates_bridge.modules.shipping.models import (
    CanonicalRate,
    Carrier,
    LineItem,
    NormalizedShipment,
    PackageDimensions,
    PostalAddress,
    ShipmentRequest,
    Weight,
    first_present,
)
from rates_bridge.modules.shipping.normalizer import normalize
from rates_bridge.modules.shipping.shipstation import ShipStationClient
from rates_bridge.modules.shipping.units import apply_markup, grams_to_ounces, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION_COUNTRY = "US"


def _text(value: Any) -> str:
    return str(value) if value is not None else ""


def shipment_request_from_payload(payload: Any, origin: PostalAddress) -> ShipmentRequest:
    """
    Translate a Shopify CarrierService callback body into a ShipmentRequest.

    Expected shape: {"rate": {"destination": {...}, "items": [{"grams": ...}]}}.
    Missing pieces default to empty values.
    """
    payload = payload if isinstance(payload, dict) else {}
    rate_req = payload.get("rate") or {}
    rate_req = rate_req if isinstance(rate_req, dict) else {}
    dest = rate_req.get("destination") or {}
    dest = dest if isinstance(dest, dict) else {}
    items = rate_req.get("items") or []
    items = items if isinstance(items, list) else []

    destination = PostalAddress(
        postal_code=_text(first_present(dest.get("postal_code"), default="")),
        state=_text(first_present(dest.get("province"), dest.get("province_code"), default="")),
        country_code=_text(first_present(
            dest.get("country"), dest.get("country_code"), default=DEFAULT_DESTINATION_COUNTRY,
        )),
    )
    line_items = tuple(
        LineItem(grams=float(to_decimal(item.get("grams"))))
        for item in items
        if isinstance(item, dict)
    )
    return ShipmentRequest(origin=origin, destination=destination, items=line_items)


class RateQuoteService:
    """
    Multi-carrier rate aggregation over ShipStation.

    All state is request-scoped except the read-only configuration passed
    to __init__.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        origin: PostalAddress,
        dimensions: PackageDimensions,
        markup_percent: float = 0,
        base_url: Optional[str] = None,
        carrier_timeout: float = 15.0,
        max_concurrency: int = 5,
        client_factory=None,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.origin = origin
        self.dimensions = dimensions
        self.markup_percent = markup_percent
        self.base_url = base_url
        self.carrier_timeout = carrier_timeout
        self.max_concurrency = max(1, max_concurrency)
        self._client_factory = client_factory or self._default_client

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "RateQuoteService":
        return cls(
            api_key=settings.SS_API_KEY,
            api_secret=settings.SS_API_SECRET,
            origin=PostalAddress(
                postal_code=settings.ORIGIN_ZIP,
                state=settings.ORIGIN_STATE,
                country_code=settings.ORIGIN_COUNTRY,
            ),
            dimensions=PackageDimensions(
                length=settings.DEFAULT_LENGTH,
                width=settings.DEFAULT_WIDTH,
                height=settings.DEFAULT_HEIGHT,
                units=settings.DEFAULT_DIMENSION_UNIT,
            ),
            markup_percent=settings.MARKUP_PERCENT,
            base_url=settings.SHIPSTATION_API_BASE,
            carrier_timeout=settings.CARRIER_RATE_TIMEOUT_SECONDS,
            max_concurrency=settings.CARRIER_CONCURRENCY,
            **kwargs
        )

    def _default_client(self) -> ShipStationClient:
        kwargs = {"base_url": self.base_url} if self.base_url else {}
        return ShipStationClient(self.api_key, self.api_secret, timeout=self.carrier_timeout, **kwargs)

    def validate(self) -> None:
        """Raise ConfigurationError if ShipStation credentials are missing."""
        if not self.api_key or not self.api_secret:
            raise ConfigurationError(
                "Missing SS_API_KEY / SS_API_SECRET env vars",
                details={"api_key_set": bool(self.api_key), "api_secret_set": bool(self.api_secret)},
            )

    def build_shipment(self, request: ShipmentRequest) -> NormalizedShipment:
        """Combine request, origin and default dimensions into one shipment."""
        return NormalizedShipment(
            origin=request.origin,
            destination=request.destination,
            weight=Weight(value=grams_to_ounces(request.total_grams), units="ounces"),
            dimensions=self.dimensions,
            residential=True,
        )

    async def quote_payload(self, payload: Dict[str, Any]) -> List[CanonicalRate]:
        """Quote a raw CarrierService callback body."""
        return await self.quote(shipment_request_from_payload(payload, self.origin))

    async def quote(self, request: ShipmentRequest) -> List[CanonicalRate]:
        """
        Get rates from every active carrier.

        Args:
            request: Translated rate request

        Returns:
            CanonicalRate list sorted by total_price (lowest first)

        Raises:
            ConfigurationError: credentials missing
            ProviderUnavailable / MalformedProviderResponse: carrier
                discovery failed
        """
        self.validate()
        shipment = self.build_shipment(request)

        async with self._client_factory() as client:
            carriers = await client.list_active_carriers()
            logger.info(f"Fetching rates from {len(carriers)} carriers")
            rates = await self._gather_rates(client, carriers, shipment)

        if self.markup_percent:
            for rate in rates:
                rate.total_price = max(0, apply_markup(rate.total_price, self.markup_percent))

        # list.sort is stable; rates arrive in carrier-list order
        rates.sort(key=lambda r: r.total_price)
        return rates

    async def _gather_rates(
        self,
        client: ShipStationClient,
        carriers: List[Carrier],
        shipment: NormalizedShipment,
    ) -> List[CanonicalRate]:
        semaphore = asyncio.Semaphore(self.max_concurrency)
        now = datetime.now(timezone.utc)

        async def fetch(index: int, carrier: Carrier) -> Tuple[int, List[CanonicalRate]]:
            async with semaphore:
                return index, await self._carrier_rates(client, carrier.code, shipment, now)

        tasks = [
            fetch(index, carrier)
            for index, carrier in enumerate(carriers)
            if carrier.code
        ]
        results = await asyncio.gather(*tasks)

        rates: List[CanonicalRate] = []
        for _, carrier_rates in sorted(results, key=lambda result: result[0]):
            rates.extend(carrier_rates)
        return rates

    async def _carrier_rates(
        self,
        client: ShipStationClient,
        carrier_code: str,
        shipment: NormalizedShipment,
        now: datetime,
    ) -> List[CanonicalRate]:
        """Rates for one carrier; any failure is logged and yields []."""
        try:
            provider_rates = await asyncio.wait_for(
                client.get_rates(carrier_code, shipment),
                timeout=self.carrier_timeout,
            )
            rates = [normalize(rate, now=now) for rate in provider_rates]
        except asyncio.TimeoutError:
            logger.warning(f"Carrier rates timeout: {carrier_code} after {self.carrier_timeout}s")
            return []
        except ProviderError as e:
            logger.warning(f"Carrier rates error: {carrier_code} {e.message}")
            return []
        except Exception as e:
            logger.warning(f"Carrier rates error: {carrier_code} {e}")
            return []

        logger.info(f"Got {len(rates)} rates from {carrier_code}")
        return rates
