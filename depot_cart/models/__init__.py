# Engine Models

from .product import Product, Depot, DepotVariant
from .cart import (
    Cart,
    CartItem,
    MIN_QUANTITY,
    MAX_QUANTITY,
    AddToCartRequest,
    CartResponse,
    CheckoutSummary,
)
from .pricing import (
    DeliveryChannel,
    SubscriptionPeriod,
    ScheduleOption,
    ScheduleOptionInfo,
    SCHEDULE_OPTIONS,
    Unit,
    PriceQuote,
    SubscriptionEstimate,
)
from .delivery import DeliveryContext, DeliveryDateOption, DeliverySchedule

__all__ = [
    "Product",
    "Depot",
    "DepotVariant",
    "Cart",
    "CartItem",
    "MIN_QUANTITY",
    "MAX_QUANTITY",
    "AddToCartRequest",
    "CartResponse",
    "CheckoutSummary",
    "DeliveryChannel",
    "SubscriptionPeriod",
    "ScheduleOption",
    "ScheduleOptionInfo",
    "SCHEDULE_OPTIONS",
    "Unit",
    "PriceQuote",
    "SubscriptionEstimate",
    "DeliveryContext",
    "DeliveryDateOption",
    "DeliverySchedule",
]
