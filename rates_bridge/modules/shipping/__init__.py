"""
Shipping Module

- units: mass / currency conversion
- models: request-scoped dataclasses
- shipstation: ShipStation API v1 client
- normalizer: ShipStation rate -> CarrierService rate
"""
from rates_bridge.modules.shipping.normalizer import normalize
from rates_bridge.modules.shipping.shipstation import ShipStationClient

__all__ = [
    "normalize",
    "ShipStationClient",
]
