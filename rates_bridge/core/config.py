"""
Application configuration

All values are resolved once at process start from the environment (or a
.env file) and treated as read-only afterwards.

- SS_API_KEY / SS_API_SECRET default to empty so the server can boot without
  them; rate requests then answer with an empty rate list.
- CS_USER empty = rates endpoint is open (no Basic auth gate).
"""
import logging
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # App
    APP_NAME: str = "ShipStation Rates Bridge"
    API_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    # ShipStation API v1 credentials (Basic Auth)
    SS_API_KEY: str = ""
    SS_API_SECRET: str = ""
    SHIPSTATION_API_BASE: str = "https://ssapi.shipstation.com"

    # Ship-from origin
    ORIGIN_ZIP: str = "60462"
    ORIGIN_STATE: str = "IL"
    ORIGIN_COUNTRY: str = "US"

    # Default package dimensions
    DEFAULT_LENGTH: float = 8
    DEFAULT_WIDTH: float = 6
    DEFAULT_HEIGHT: float = 4
    DEFAULT_DIMENSION_UNIT: str = "inch"

    # Percentage added to every quoted rate (10 = +10%)
    MARKUP_PERCENT: float = 0

    # Optional Basic auth gate for the CarrierService callback
    CS_USER: str = ""
    CS_PASS: str = ""

    # Per-carrier fan-out
    CARRIER_RATE_TIMEOUT_SECONDS: float = 15.0
    CARRIER_CONCURRENCY: int = 5

    @field_validator(
        "DEFAULT_LENGTH", "DEFAULT_WIDTH", "DEFAULT_HEIGHT", "MARKUP_PERCENT",
        "CARRIER_RATE_TIMEOUT_SECONDS",
        mode="before",
    )
    @classmethod
    def lenient_numeric(cls, v, info):
        """
        Parse numeric env values leniently.

        Blank -> default, "12,5" -> 12.5, unparseable -> default (logged).
        """
        if not isinstance(v, str):
            return v
        default = cls.model_fields[info.field_name].default
        text = v.strip().replace(",", ".")
        if not text:
            return default
        try:
            return float(text)
        except ValueError:
            logger.warning(f"Invalid {info.field_name}={v!r}, using default {default}")
            return default

    @field_validator("SHIPSTATION_API_BASE")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("CARRIER_CONCURRENCY")
    @classmethod
    def concurrency_at_least_one(cls, v: int) -> int:
        return max(1, v)

    @property
    def shipstation_configured(self) -> bool:
        return bool(self.SS_API_KEY and self.SS_API_SECRET)

    @property
    def auth_enabled(self) -> bool:
        return bool(self.CS_USER)


settings = Settings()

if not settings.shipstation_configured:
    logger.warning("SS_API_KEY / SS_API_SECRET not set - /rates will return no rates")
