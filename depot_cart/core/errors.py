"""Engine exceptions"""


class CartEngineError(Exception):
    """Base exception for cart engine errors"""
    pass


class CatalogLookupError(CartEngineError):
    """Variant catalog or depot lookup failed (network, 4xx/5xx, timeout)"""
    pass
