"""
ShipStation API v1 Client

Two calls are used for live rating:
- GET  /carriers              -> carriers connected to the account
- POST /shipments/getrates    -> rates for one carrier

Authentication is HTTP Basic with the API key/secret pair. Each call is made
exactly once; retry policy belongs to the caller.

Usage:
    async with ShipStationClient(api_key, api_secret) as client:
        carriers = await client.list_active_carriers()
        rates = await client.get_rates(carriers[0].code, shipment)
"""
import logging
from typing import Any, List, Optional

import httpx

from rates_bridge.core.exceptions import (
    CarrierRateError,
    MalformedProviderResponse,
    ProviderUnavailable,
)
from rates_bridge.modules.shipping.models import Carrier, NormalizedShipment, ProviderRate

logger = logging.getLogger(__name__)

SHIPSTATION_API_BASE = "https://ssapi.shipstation.com"

CARRIERS_PATH = "/carriers"
GETRATES_PATH = "/shipments/getrates"


class ShipStationClient:
    """
    Async ShipStation client.

    Covers the carrier directory (list_active_carriers) and per-carrier rate
    fetching (get_rates). The underlying httpx.AsyncClient is opened by the
    async context manager or init(), and closed by close().
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = SHIPSTATION_API_BASE,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        return await self.init()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def init(self):
        """Initialize client without context manager. Must call close() when done."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=httpx.BasicAuth(self.api_key, self.api_secret),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("ShipStationClient used before init()")
        return self._client

    @staticmethod
    def _json_array(response: httpx.Response, what: str) -> List[Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedProviderResponse(
                f"ShipStation {what} returned invalid JSON",
                details={"error": str(e)},
            ) from e
        if not isinstance(data, list):
            raise MalformedProviderResponse(
                f"ShipStation {what} returned {type(data).__name__}, expected array",
            )
        return data

    async def list_active_carriers(self) -> List[Carrier]:
        """
        Get the carriers connected to the ShipStation account.

        Raises:
            ProviderUnavailable: non-2xx status or transport failure
            MalformedProviderResponse: body is not a JSON array
        """
        client = self._require_client()
        try:
            response = await client.get(CARRIERS_PATH)
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"ShipStation carriers request failed: {e}") from e

        if not response.is_success:
            raise ProviderUnavailable(
                f"ShipStation carriers error {response.status_code}",
                status_code=response.status_code,
            )

        records = self._json_array(response, "carriers")
        carriers = [Carrier.from_dict(r) for r in records if isinstance(r, dict)]
        logger.debug(f"ShipStation returned {len(carriers)} carriers")
        return carriers

    async def get_rates(self, carrier_code: str, shipment: NormalizedShipment) -> List[ProviderRate]:
        """
        Get rates for one carrier.

        Args:
            carrier_code: ShipStation carrier code (e.g. "stamps_com")
            shipment: Shipment description shared by all carriers

        Returns:
            List of ProviderRate; empty when the carrier has no service

        Raises:
            CarrierRateError: non-2xx status or transport failure
            MalformedProviderResponse: body is not a JSON array
        """
        client = self._require_client()
        try:
            response = await client.post(GETRATES_PATH, json=shipment.to_getrates_body(carrier_code))
        except httpx.HTTPError as e:
            raise CarrierRateError(
                carrier_code,
                message=f"ShipStation getrates {carrier_code} request failed: {e}",
            ) from e

        if not response.is_success:
            raise CarrierRateError(carrier_code, status_code=response.status_code, body=response.text)

        records = self._json_array(response, f"getrates {carrier_code}")
        return [
            ProviderRate.from_dict(r, carrier_code=carrier_code)
            for r in records
            if isinstance(r, dict)
        ]
