"""Catalog models: products, depots and depot-scoped variants"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional


class Depot(BaseModel):
    """Fulfillment location"""
    id: int
    name: str = ""
    is_online: bool = False
    address: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Product(BaseModel):
    """Product in the catalog"""
    id: int
    name: str
    category: Optional[str] = None
    tags: Optional[str] = None
    is_dairy_product: bool = False
    description: Optional[str] = None
    attachment_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("category", mode="before")
    @classmethod
    def _category_name(cls, value):
        # The catalog may embed the category object
        if isinstance(value, dict):
            return value.get("name")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _join_tags(cls, value):
        if isinstance(value, list):
            return ", ".join(str(tag) for tag in value)
        return value

    @property
    def tag_list(self) -> list[str]:
        """Tags split from the comma separated free text"""
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


class DepotVariant(BaseModel):
    """A product's purchasable unit within one depot"""
    id: int
    product_id: int
    depot_id: int
    name: str = ""
    mrp: Optional[float] = None
    buy_once_price: Optional[float] = None
    price_3_day: Optional[float] = Field(default=None, alias="price3Day")
    price_15_day: Optional[float] = Field(default=None, alias="price15Day")
    price_1_month: Optional[float] = Field(default=None, alias="price1Month")
    closing_qty: Optional[int] = None
    minimum_qty: Optional[int] = None
    not_in_stock: bool = False
    is_hidden: bool = False
    depot: Optional[Depot] = None
    product: Optional[Product] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @property
    def is_enabled(self) -> bool:
        """Purchasable: neither out of stock nor hidden"""
        return not self.not_in_stock and not self.is_hidden

    @property
    def is_online(self) -> Optional[bool]:
        """Home delivery depot; None when the depot descriptor is missing"""
        if self.depot is None:
            return None
        return self.depot.is_online
