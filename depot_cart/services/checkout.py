"""Checkout view of the cart"""

from ..database.carts import CartStore
from ..models.cart import CheckoutSummary
from .reconciler import summarize_availability


def checkout_summary(store: CartStore) -> CheckoutSummary:
    """Only available items are offered to checkout"""
    available = store.available_items()
    summary = summarize_availability(store)
    message = summary.message if available else "No items are available for checkout"
    return CheckoutSummary(
        available_items=available,
        unavailable_items=store.unavailable_items(),
        available_subtotal=store.available_subtotal,
        can_checkout=bool(available),
        message=message,
    )
