"""Shared pytest fixtures for engine tests."""
from __future__ import annotations

import asyncio
from typing import Callable, Optional

import pytest

from depot_cart.core.errors import CatalogLookupError
from depot_cart.database.carts import CartStore
from depot_cart.database.kv import InMemoryKeyValueStore
from depot_cart.models.cart import CartItem
from depot_cart.models.product import Depot, DepotVariant

ONLINE_DEPOT = Depot(id=1, name="Dombivli", is_online=True)
OTHER_ONLINE_DEPOT = Depot(id=2, name="Thane", is_online=True)
PICKUP_DEPOT = Depot(id=3, name="Kalyan Outlet", is_online=False)
DEPOTS = {d.id: d for d in (ONLINE_DEPOT, OTHER_ONLINE_DEPOT, PICKUP_DEPOT)}


def make_variant(
    variant_id: int,
    product_id: int = 10,
    depot_id: int = 1,
    name: str = "1L",
    mrp: Optional[float] = 100,
    buy_once_price: Optional[float] = None,
    **fields,
) -> DepotVariant:
    return DepotVariant(
        id=variant_id,
        product_id=product_id,
        depot_id=depot_id,
        name=name,
        mrp=mrp,
        buy_once_price=buy_once_price,
        depot=DEPOTS.get(depot_id),
        **fields,
    )


def make_item(
    variant_id: int,
    product_id: int = 10,
    depot_id: int = 1,
    price: float = 50,
    quantity: int = 1,
    variant_name: str = "1L",
    **fields,
) -> CartItem:
    fields.setdefault("original_depot_id", depot_id)
    fields.setdefault("original_variant_id", variant_id)
    return CartItem(
        product_id=product_id,
        variant_id=variant_id,
        name=f"Product {product_id}",
        variant_name=variant_name,
        price=price,
        quantity=quantity,
        depot_id=depot_id,
        **fields,
    )


class FakeCatalog:
    """Scriptable variant catalog; depots can be gated or made to fail."""

    def __init__(self, variants: Optional[list[DepotVariant]] = None):
        self.variants = list(variants or [])
        self.calls: list[int] = []
        self.gates: dict[int, asyncio.Event] = {}
        self.failing: set[int] = set()

    async def get_variants_for_depot(self, depot_id: int) -> list[DepotVariant]:
        self.calls.append(depot_id)
        gate = self.gates.get(depot_id)
        if gate is not None:
            await gate.wait()
        if depot_id in self.failing:
            raise CatalogLookupError(f"depot {depot_id} lookup failed")
        return [v for v in self.variants if v.depot_id == depot_id]

    async def get_variants_for_product(self, product_id: int, depot_id: int) -> list[DepotVariant]:
        variants = await self.get_variants_for_depot(depot_id)
        return [v for v in variants if v.product_id == product_id]


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv: InMemoryKeyValueStore) -> CartStore:
    return CartStore(kv)


@pytest.fixture
def variant_factory() -> Callable[..., DepotVariant]:
    return make_variant


@pytest.fixture
def item_factory() -> Callable[..., CartItem]:
    return make_item


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()
