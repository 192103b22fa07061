"""In-memory variant catalog and area master data"""

from dataclasses import dataclass, field
from typing import Optional

from ..models.delivery import DeliveryContext
from ..models.product import Depot, DepotVariant, Product

DEPOTS: dict[int, Depot] = {
    1: Depot(id=1, name="Dombivli Home Delivery", is_online=True),
    2: Depot(id=2, name="Kalyan Farm Outlet", is_online=False, address="Station Road, Kalyan West"),
    3: Depot(id=3, name="Thane Home Delivery", is_online=True),
}

PRODUCTS: dict[int, Product] = {
    101: Product(
        id=101,
        name="A2 Cow Milk",
        category="Milk",
        tags="a2, cow, fresh",
        is_dairy_product=True,
        description="Farm fresh A2 milk from indigenous cows, delivered chilled.",
        attachment_url="/uploads/products/a2-milk.jpg",
    ),
    102: Product(
        id=102,
        name="Buffalo Milk",
        category="Milk",
        tags="buffalo, full cream",
        is_dairy_product=True,
        description="Creamy full-fat buffalo milk.",
        attachment_url="/uploads/products/buffalo-milk.jpg",
    ),
    103: Product(
        id=103,
        name="Desi Ghee",
        category="Ghee",
        tags="bilona, a2",
        is_dairy_product=True,
        description="Bilona churned ghee from A2 cow milk.",
        attachment_url="/uploads/products/ghee.jpg",
    ),
    104: Product(
        id=104,
        name="Cold Pressed Groundnut Oil",
        category="Oils",
        tags="wood pressed, groundnut",
        is_dairy_product=False,
        description="Wood pressed groundnut oil.",
    ),
}


def _variant(
    variant_id: int,
    product_id: int,
    depot_id: int,
    name: str,
    mrp: float,
    buy_once: float,
    price_3_day: Optional[float] = None,
    price_15_day: Optional[float] = None,
    price_1_month: Optional[float] = None,
    closing_qty: int = 100,
    not_in_stock: bool = False,
    is_hidden: bool = False,
) -> DepotVariant:
    return DepotVariant(
        id=variant_id,
        product_id=product_id,
        depot_id=depot_id,
        name=name,
        mrp=mrp,
        buy_once_price=buy_once,
        price_3_day=price_3_day,
        price_15_day=price_15_day,
        price_1_month=price_1_month,
        closing_qty=closing_qty,
        minimum_qty=1,
        not_in_stock=not_in_stock,
        is_hidden=is_hidden,
        depot=DEPOTS[depot_id],
        product=PRODUCTS[product_id],
    )


VARIANTS: list[DepotVariant] = [
    # Dombivli (home delivery)
    _variant(1001, 101, 1, "500ml", 55, 55, 47, 46, 43),
    _variant(1002, 101, 1, "1 Ltrs", 100, 100, 90, 80, 75),
    _variant(1003, 102, 1, "1L", 90, 88, 85, 82, 80),
    _variant(1004, 103, 1, "500 g", 1400, 1350),
    _variant(1005, 104, 1, "1 ltr", 380, 360),
    # Kalyan (pickup)
    _variant(2001, 101, 2, "500 ml", 55, 50, 45, 44, 41),
    _variant(2002, 101, 2, "1000ml", 100, 95, 88, 78, 72),
    _variant(2003, 103, 2, "500g", 1400, 1300, not_in_stock=True),
    # Thane (home delivery); no buffalo milk, oil hidden
    _variant(3001, 101, 3, "500ml", 58, 58, 50, 48, 45),
    _variant(3002, 101, 3, "1L", 110, 110, 99, 90, 85),
    _variant(3003, 103, 3, "500g", 1450, 1450),
    _variant(3004, 104, 3, "1L", 390, 390, is_hidden=True),
]


@dataclass
class AreaMaster:
    """Serviceable area: pincodes mapped onto one depot"""
    id: int
    name: str
    depot_id: int
    pincodes: list[str]
    delivery_schedule: list[str] = field(default_factory=list)


AREAS: list[AreaMaster] = [
    AreaMaster(1, "Dombivli East", 1, ["421201", "421203"], ["monday", "thursday"]),
    AreaMaster(2, "Kalyan West", 2, ["421301"], ["tuesday", "friday", "sunday"]),
    AreaMaster(3, "Thane West", 3, ["400601", "400602"], []),
]


class InMemoryCatalog:
    """
    In-process variant catalog and depot resolver.

    Implements the same lookups as the remote catalog client so the engine
    can run without the storefront backend.
    """

    def __init__(
        self,
        variants: Optional[list[DepotVariant]] = None,
        products: Optional[dict[int, Product]] = None,
        areas: Optional[list[AreaMaster]] = None,
        depots: Optional[dict[int, Depot]] = None,
    ):
        self.variants = list(VARIANTS if variants is None else variants)
        self.products = dict(PRODUCTS if products is None else products)
        self.areas = list(AREAS if areas is None else areas)
        self.depots = dict(DEPOTS if depots is None else depots)

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_variant(self, variant_id: int) -> Optional[DepotVariant]:
        """Get a variant by ID"""
        return next((v for v in self.variants if v.id == variant_id), None)

    async def get_variants_for_product(
        self, product_id: int, depot_id: int
    ) -> list[DepotVariant]:
        return [
            v for v in self.variants
            if v.product_id == product_id and v.depot_id == depot_id
        ]

    async def get_variants_for_depot(self, depot_id: int) -> list[DepotVariant]:
        return [v for v in self.variants if v.depot_id == depot_id]

    async def get_all_variants_for_product(self, product_id: int) -> list[DepotVariant]:
        """Variants across every depot, for compare-all pricing"""
        return [v for v in self.variants if v.product_id == product_id]

    async def resolve_depot_for_pincode(self, pincode: str) -> Optional[DeliveryContext]:
        pincode = pincode.strip()
        area = next((a for a in self.areas if pincode in a.pincodes), None)
        if area is None:
            return None

        depot = self.depots.get(area.depot_id)
        if depot is None:
            return None

        return DeliveryContext(
            depot_id=depot.id,
            depot_name=depot.name,
            area_name=area.name,
            is_online=depot.is_online,
            pincode=pincode,
            delivery_schedule=list(area.delivery_schedule),
        )
