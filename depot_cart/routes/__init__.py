# API Routes

from .cart import router as cart_router
from .pricing import router as pricing_router
from .delivery import router as delivery_router

__all__ = ["cart_router", "pricing_router", "delivery_router"]
