"""API router aggregation."""
from fastapi import APIRouter

from rates_bridge.api.routes import rates

api_router = APIRouter()
api_router.include_router(rates.router)
