"""
Rates Bridge Exception Hierarchy

All exceptions carry a code, message and details so they can be logged in a
structured way.

Exception Hierarchy:
    RatesBridgeError
    ├── ConfigurationError
    └── ProviderError
        ├── ProviderUnavailable
        ├── CarrierRateError
        └── MalformedProviderResponse

Propagation:
- CarrierRateError / MalformedProviderResponse raised for one carrier only
  remove that carrier's rates.
- ConfigurationError / ProviderUnavailable empty the whole response.
"""
from typing import Optional, Dict, Any


class RatesBridgeError(Exception):
    """
    Base exception for all rates bridge errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code
        details: Additional context for logging
    """

    default_code: str = "RATES_BRIDGE_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationError(RatesBridgeError):
    """Provider credentials are missing."""
    default_code = "CONFIGURATION_ERROR"


# =============================================================================
# PROVIDER (SHIPSTATION) ERRORS
# =============================================================================

class ProviderError(RatesBridgeError):
    """Base exception for rate provider errors."""
    default_code = "PROVIDER_ERROR"


class ProviderUnavailable(ProviderError):
    """Carrier listing call failed."""
    default_code = "PROVIDER_UNAVAILABLE"

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details=details, **kwargs)


class CarrierRateError(ProviderError):
    """Rate call for a single carrier failed."""
    default_code = "CARRIER_RATE_FAILED"

    def __init__(
        self,
        carrier_code: str,
        status_code: Optional[int] = None,
        body: str = "",
        message: Optional[str] = None,
        **kwargs
    ):
        self.carrier_code = carrier_code
        self.status_code = status_code
        self.body = body
        details = kwargs.pop("details", {})
        details.update({
            "carrier_code": carrier_code,
            "status_code": status_code,
            "body": body[:500] if body else body,
        })
        super().__init__(
            message or f"ShipStation getrates {carrier_code} {status_code}: {body}",
            details=details,
            **kwargs
        )


class MalformedProviderResponse(ProviderError):
    """Provider answered with something other than a JSON array."""
    default_code = "MALFORMED_PROVIDER_RESPONSE"
