"""
ShipStation Rates Bridge

Shopify CarrierService callback -> ShipStation API v1 live rates.
"""
__version__ = "1.0.0"
