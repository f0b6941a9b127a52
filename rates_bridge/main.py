"""
ShipStation Rates Bridge
FastAPI application entry point

Shopify CarrierService callback -> ShipStation API v1 live rates.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rates_bridge.api import api_router
from rates_bridge.core.config import settings
from rates_bridge.core.logging import configure_logging
from rates_bridge.middleware.request_context import RequestContextMiddleware
from rates_bridge.schemas.rates import HealthResponse

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info(f"ShipStation v1 Rates server running on :{settings.PORT}")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="Shopify CarrierService callback backed by ShipStation live rates",
    version=settings.API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.include_router(api_router)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.API_VERSION,
    }


def run():
    import uvicorn
    uvicorn.run(
        "rates_bridge.main:app",
        host="0.0.0.0",
        port=settings.PORT,
    )


if __name__ == "__main__":
    run()
