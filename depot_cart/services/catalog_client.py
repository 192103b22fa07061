"""
Catalog API Client

HTTP client for the storefront catalog and area-master endpoints, plus the
lookup protocols the engine depends on.
"""

import asyncio
import logging
from typing import Optional, Any, Protocol

import httpx
from pydantic import ValidationError

from ..core.errors import CatalogLookupError
from ..models.delivery import DeliveryContext
from ..models.product import Depot, DepotVariant

logger = logging.getLogger(__name__)


class VariantCatalog(Protocol):
    """Depot-scoped variant lookups"""

    async def get_variants_for_product(
        self, product_id: int, depot_id: int
    ) -> list[DepotVariant]:
        ...

    async def get_variants_for_depot(self, depot_id: int) -> list[DepotVariant]:
        ...


class DepotResolver(Protocol):
    """Pincode to depot resolution"""

    async def resolve_depot_for_pincode(self, pincode: str) -> Optional[DeliveryContext]:
        ...


class CatalogClient:
    """
    Client for the storefront catalog API.

    Transport errors and 5xx responses are retried with exponential
    backoff; anything still failing surfaces as CatalogLookupError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        backoff_seconds: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize catalog client.

        Args:
            base_url: Origin of the storefront backend
            timeout: Per-request timeout in seconds
            max_retries: Extra attempts after the first failure
            backoff_seconds: Base delay, doubled on every retry
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _get(self, path: str, params: Optional[dict] = None) -> Optional[Any]:
        """
        GET a `{success, data}` envelope and return `data`.

        Returns None for 404 or an unsuccessful envelope.
        """
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await self._http_client.get(path, params=params)
            except httpx.TransportError as e:
                last_error = e
                logger.warning(f"Catalog request GET {path} failed (attempt {attempt + 1}): {e}")
            else:
                if response.status_code == 404:
                    return None
                if response.status_code < 500:
                    break
                last_error = httpx.HTTPStatusError(
                    f"Server error {response.status_code}",
                    request=response.request,
                    response=response,
                )
                logger.warning(
                    f"Catalog request GET {path} returned {response.status_code} "
                    f"(attempt {attempt + 1})"
                )

            if attempt < self.max_retries:
                await asyncio.sleep(self.backoff_seconds * (2 ** attempt))
        else:
            raise CatalogLookupError(f"GET {path} failed: {last_error}") from last_error

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise CatalogLookupError(f"GET {path} failed with status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogLookupError(f"GET {path} returned invalid JSON") from e

        if not isinstance(payload, dict) or not payload.get("success"):
            return None
        return payload.get("data")

    # ==================== Variant APIs ====================

    async def get_variants_for_depot(self, depot_id: int) -> list[DepotVariant]:
        """All variants stocked by a depot"""
        data = await self._get("/api/products/public", params={"depotId": depot_id})
        return self._parse_products_with_variants(data, depot_id)

    async def get_variants_for_product(
        self, product_id: int, depot_id: int
    ) -> list[DepotVariant]:
        """Variants of one product within a depot"""
        variants = await self.get_variants_for_depot(depot_id)
        return [v for v in variants if v.product_id == product_id]

    async def get_all_variants_for_product(self, product_id: int) -> list[DepotVariant]:
        """Variants of one product across every depot"""
        data = await self._get(f"/api/products/public/{product_id}/variants")
        if not isinstance(data, list):
            return []
        return self._parse_variants(data, product_id=product_id)

    def _parse_products_with_variants(
        self, data: Any, depot_id: int
    ) -> list[DepotVariant]:
        if isinstance(data, dict):
            data = data.get("products")
        if not isinstance(data, list):
            return []

        variants: list[DepotVariant] = []
        for product in data:
            if not isinstance(product, dict):
                continue
            parent = {k: v for k, v in product.items() if k != "variants"}
            variants.extend(
                self._parse_variants(
                    product.get("variants") or [],
                    product_id=product.get("id"),
                    depot_id=depot_id,
                    parent=parent,
                )
            )
        return variants

    def _parse_variants(
        self,
        raw_variants: list,
        product_id: Optional[int] = None,
        depot_id: Optional[int] = None,
        parent: Optional[dict] = None,
    ) -> list[DepotVariant]:
        variants = []
        for raw in raw_variants:
            if not isinstance(raw, dict):
                continue
            data = dict(raw)
            if product_id is not None:
                data.setdefault("productId", product_id)
            if depot_id is not None:
                data.setdefault("depotId", depot_id)
            if parent and "name" in parent:
                data.setdefault("product", parent)
            try:
                variants.append(DepotVariant.model_validate(data))
            except ValidationError as e:
                logger.warning(f"Skipping malformed variant {raw.get('id')}: {e}")
        return variants

    # ==================== Area APIs ====================

    async def resolve_depot_for_pincode(self, pincode: str) -> Optional[DeliveryContext]:
        """Resolve the depot serving a pincode; None means no service here"""
        data = await self._get(f"/api/public/area-masters/by-pincode/{pincode}")
        if not isinstance(data, list):
            return None

        for area in data:
            if not isinstance(area, dict) or not area.get("depot"):
                continue
            try:
                depot = Depot.model_validate(area["depot"])
            except ValidationError as e:
                logger.warning(f"Skipping area {area.get('id')} with malformed depot: {e}")
                continue
            return DeliveryContext(
                depot_id=depot.id,
                depot_name=depot.name,
                area_name=area.get("name") or "",
                is_online=depot.is_online,
                pincode=pincode,
                delivery_schedule=[
                    day for day in (area.get("deliverySchedule") or [])
                    if isinstance(day, str)
                ],
            )
        return None
