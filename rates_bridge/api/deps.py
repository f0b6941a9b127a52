"""
API dependencies

- require_carrier_service_auth: optional HTTP Basic gate for the
  CarrierService callback (disabled when CS_USER is empty)
- get_rate_quote_service: RateQuoteService built from settings
"""
import logging
import secrets
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from rates_bridge.core.config import settings
from rates_bridge.services.rate_quote_service import RateQuoteService

logger = logging.getLogger(__name__)

AUTH_REALM = "Shopify Rates"

# Only consulted when CS_USER is set; an open endpoint ignores Authorization
basic_auth = HTTPBasic(auto_error=False, realm=AUTH_REALM)


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


async def require_carrier_service_auth(request: Request) -> None:
    """Reject the request with 401 unless CS_USER/CS_PASS match (when configured)."""
    if not settings.auth_enabled:
        return

    credentials: Optional[HTTPBasicCredentials]
    try:
        credentials = await basic_auth(request)
    except HTTPException:
        # undecodable header or no ":" separator
        credentials = None

    if (
        credentials is None
        or not _matches(credentials.username, settings.CS_USER)
        or not _matches(credentials.password, settings.CS_PASS)
    ):
        logger.warning("CarrierService auth failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": f'Basic realm="{AUTH_REALM}"'},
        )


def get_rate_quote_service() -> RateQuoteService:
    return RateQuoteService.from_settings(settings)
