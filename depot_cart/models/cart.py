"""Cart models"""

import math

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional

MIN_QUANTITY = 1
MAX_QUANTITY = 99


def clamp_quantity(quantity: int) -> int:
    """Clamp a quantity into [MIN_QUANTITY, MAX_QUANTITY]"""
    return max(MIN_QUANTITY, min(MAX_QUANTITY, quantity))


class CartItem(BaseModel):
    """Line item in the cart, priced against one depot"""
    product_id: int
    variant_id: int
    name: str
    variant_name: str = ""
    price: float = 0.0
    quantity: int = MIN_QUANTITY
    image_url: Optional[str] = None
    depot_id: int
    original_depot_id: Optional[int] = None
    original_variant_id: Optional[int] = None
    is_available: Optional[bool] = None
    unavailable_reason: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("quantity", mode="before")
    @classmethod
    def _truncate_quantity(cls, value):
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError("quantity must be a finite number")
            return int(value)
        return value

    @field_validator("quantity")
    @classmethod
    def _clamp_quantity(cls, value: int) -> int:
        return clamp_quantity(value)

    @property
    def counts_as_available(self) -> bool:
        # Items never validated are treated as available
        return self.is_available is not False

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Cart(BaseModel):
    """Persisted cart shape"""
    items: list[CartItem] = Field(default_factory=list)


class AddToCartRequest(BaseModel):
    """Request to add a depot variant to the cart"""
    product_id: int
    variant_id: int
    quantity: int = Field(default=1, gt=0)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CartResponse(BaseModel):
    """Cart API response"""
    items: list[CartItem]
    subtotal: float
    available_subtotal: float
    total_quantity: int
    message: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CheckoutSummary(BaseModel):
    """What checkout is allowed to consume"""
    available_items: list[CartItem]
    unavailable_items: list[CartItem]
    available_subtotal: float
    can_checkout: bool
    message: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
