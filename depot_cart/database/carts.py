"""Persisted cart store"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from ..models.cart import Cart, CartItem, clamp_quantity
from ..models.product import Product, DepotVariant
from .kv import KeyValueStore, InMemoryKeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "cart"


class CartStore:
    """
    Single source of truth for cart contents.

    Items are keyed by variant id; every mutation is written through to
    the injected key-value store. Nothing here raises on bad input or
    bad storage: quantities are clamped and unreadable state loads empty.
    """

    def __init__(
        self,
        storage: Optional[KeyValueStore] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        self.storage = storage if storage is not None else InMemoryKeyValueStore()
        self.storage_key = storage_key
        self._items: list[CartItem] = self._load()

    # ==================== Persistence ====================

    def _load(self) -> list[CartItem]:
        """Deserialize prior state, falling back to an empty cart"""
        try:
            raw = self.storage.get(self.storage_key)
        except Exception as e:
            logger.warning(f"Could not read cart from storage: {e}")
            return []

        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Stored cart is not valid JSON, starting empty")
            return []

        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            logger.warning("Stored cart has unexpected shape, starting empty")
            return []

        items: list[CartItem] = []
        seen: set[int] = set()
        for entry in payload["items"]:
            try:
                item = CartItem.model_validate(entry)
            except (ValidationError, ValueError, OverflowError):
                logger.warning(f"Dropping malformed stored cart item: {entry!r}")
                continue
            if item.variant_id in seen:
                continue
            seen.add(item.variant_id)
            items.append(item)

        logger.debug(f"Loaded {len(items)} cart items from storage")
        return items

    def _persist(self) -> None:
        cart = Cart(items=self._items)
        try:
            self.storage.set(
                self.storage_key,
                cart.model_dump_json(by_alias=True, exclude_none=True),
            )
        except Exception as e:
            # In-memory state stays authoritative
            logger.warning(f"Could not persist cart: {e}")

    # ==================== Mutations ====================

    def add(self, item: CartItem) -> CartItem:
        """Add an item, merging quantities with an existing line for the same variant"""
        existing = self.get(item.variant_id)
        if existing is None:
            added = item.model_copy()
            self._items = [*self._items, added]
            self._persist()
            return added

        merged = existing.model_copy(
            update={
                "quantity": clamp_quantity(existing.quantity + item.quantity),
                "depot_id": item.depot_id,
                "original_depot_id": existing.original_depot_id or item.original_depot_id,
                "original_variant_id": existing.original_variant_id or item.original_variant_id,
                "is_available": item.is_available,
                "unavailable_reason": item.unavailable_reason,
            }
        )
        self._replace_one(merged)
        return merged

    def add_variant(
        self,
        product: Product,
        variant: DepotVariant,
        quantity: int = 1,
        image_base_url: str = "",
    ) -> CartItem:
        """Build a line item from a catalog product/variant and add it"""
        image_url = None
        if product.attachment_url:
            image_url = f"{image_base_url}{product.attachment_url}"

        item = CartItem(
            product_id=product.id,
            variant_id=variant.id,
            name=product.name,
            variant_name=variant.name or "",
            price=variant.buy_once_price or variant.mrp or 0,
            quantity=quantity,
            image_url=image_url,
            depot_id=variant.depot_id,
            original_depot_id=variant.depot_id,
            original_variant_id=variant.id,
            is_available=True,
        )
        return self.add(item)

    def remove(self, variant_id: int) -> None:
        """Remove a line item; no-op if absent"""
        remaining = [it for it in self._items if it.variant_id != variant_id]
        if len(remaining) != len(self._items):
            self._items = remaining
            self._persist()

    def increment(self, variant_id: int) -> Optional[CartItem]:
        return self._adjust(variant_id, 1)

    def decrement(self, variant_id: int) -> Optional[CartItem]:
        """Lower quantity by one; never removes the line"""
        return self._adjust(variant_id, -1)

    def clear(self) -> None:
        """Empty the cart, e.g. after an order was placed"""
        self._items = []
        self._persist()

    def replace_items(self, items: list[CartItem]) -> None:
        """Atomically swap in a new item list"""
        self._items = [it.model_copy() for it in items]
        self._persist()

    def _adjust(self, variant_id: int, delta: int) -> Optional[CartItem]:
        existing = self.get(variant_id)
        if existing is None:
            return None
        updated = existing.model_copy(
            update={"quantity": clamp_quantity(existing.quantity + delta)}
        )
        self._replace_one(updated)
        return updated

    def _replace_one(self, updated: CartItem) -> None:
        self._items = [
            updated if it.variant_id == updated.variant_id else it
            for it in self._items
        ]
        self._persist()

    # ==================== Reads ====================

    def get(self, variant_id: int) -> Optional[CartItem]:
        return next(
            (it for it in self._items if it.variant_id == variant_id),
            None,
        )

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def available_items(self) -> list[CartItem]:
        return [it for it in self._items if it.counts_as_available]

    def unavailable_items(self) -> list[CartItem]:
        return [it for it in self._items if not it.counts_as_available]

    @property
    def subtotal(self) -> float:
        return sum(it.line_total for it in self._items)

    @property
    def available_subtotal(self) -> float:
        return sum(it.line_total for it in self.available_items())

    @property
    def total_quantity(self) -> int:
        return sum(it.quantity for it in self._items)
