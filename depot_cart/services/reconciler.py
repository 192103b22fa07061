"""
Cart reconciliation

Re-validates every cart line against the variant catalog of the currently
selected depot. Items are annotated as available or unavailable, never
dropped; removing an item is always a user action.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.config import settings
from ..core.state import ReconcilePhase, ReconcileState
from ..database.carts import CartStore
from ..models.cart import CartItem
from ..models.product import DepotVariant
from .catalog_client import VariantCatalog
from .pricing import buy_once_price, canonical_unit

logger = logging.getLogger(__name__)

REASON_NOT_IN_LOCATION = "Not available in this location"
REASON_OUT_OF_STOCK = "Out of stock"
REASON_UNAVAILABLE = "Currently unavailable"
REASON_SIZE_UNAVAILABLE = "Selected size not available in this location"
REASON_DUPLICATE = "Already in cart"
REASON_LOOKUP_FAILED = "Unable to verify availability"


@dataclass
class ValidationSummary:
    """Counts and a user-facing message for the annotated cart"""
    total_items: int
    available_count: int
    unavailable_count: int
    message: str


def summarize_availability(store: CartStore) -> ValidationSummary:
    available = len(store.available_items())
    unavailable = len(store.unavailable_items())

    if unavailable == 0:
        message = "All items are available for delivery"
    elif available == 0:
        message = "No items are available in this location"
    else:
        plural = "s" if unavailable > 1 else ""
        message = f"{unavailable} item{plural} not available in this location"

    return ValidationSummary(
        total_items=available + unavailable,
        available_count=available,
        unavailable_count=unavailable,
        message=message,
    )


def _unavailable(item: CartItem, reason: str) -> CartItem:
    return item.model_copy(update={"is_available": False, "unavailable_reason": reason})


class CartReconciler:
    """
    Keeps a CartStore consistent with the depot currently selected.

    Passes are driven by an explicit state machine: a call is suppressed
    while a pass is in flight, and for a depot already validated. A call
    for another depot made during a pass only records that depot; once the
    in-flight pass completes its (now stale) result is discarded and the
    newest depot is validated instead. At most one lookup is in flight.
    """

    def __init__(
        self,
        store: CartStore,
        catalog: VariantCatalog,
        enforce_closing_qty: Optional[bool] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.enforce_closing_qty = (
            settings.enforce_closing_qty if enforce_closing_qty is None else enforce_closing_qty
        )
        self._state = ReconcileState()
        self._requested_depot: Optional[int] = None

    @property
    def state(self) -> ReconcileState:
        return self._state

    @property
    def requested_depot(self) -> Optional[int]:
        return self._requested_depot

    async def validate_cart(self, depot_id: int) -> None:
        """Reconcile the cart against depot_id. Never raises."""
        self._requested_depot = depot_id

        if self.store.is_empty:
            logger.debug("No items to validate")
            return

        if self._state.suppresses(depot_id):
            if self._state.is_validating and self._state.depot_id != depot_id:
                logger.info(
                    f"Validation for depot {self._state.depot_id} in flight, "
                    f"depot {depot_id} will be validated next"
                )
            else:
                logger.debug(f"Skipping duplicate validation for depot {depot_id}")
            return

        target: Optional[int] = depot_id
        while target is not None:
            await self._run_pass(target)
            if self._requested_depot == target or self.store.is_empty:
                break
            target = self._requested_depot

    def invalidate(self) -> None:
        """Forget the last validated depot so the next call re-runs"""
        if not self._state.is_validating:
            self._state = ReconcileState()

    async def revalidate(self) -> None:
        """Re-run validation for the current depot (reconnect, tab shown)"""
        if self._requested_depot is None:
            return
        self.invalidate()
        await self.validate_cart(self._requested_depot)

    async def _run_pass(self, depot_id: int) -> None:
        self._state = self._state.start(depot_id)
        snapshot = self.store.items
        logger.info(f"Starting cart validation for depot {depot_id} ({len(snapshot)} items)")

        try:
            variants = await self.catalog.get_variants_for_depot(depot_id)
        except Exception as e:
            logger.error(f"Error validating cart for depot {depot_id}: {e}")
            if self._is_stale(depot_id):
                return
            self._apply(snapshot, [_unavailable(it, REASON_LOOKUP_FAILED) for it in snapshot])
            self._state = self._state.fail()
            return

        if self._is_stale(depot_id):
            return

        annotated = self.annotate(snapshot, variants, depot_id)
        self._apply(snapshot, annotated)
        self._state = self._state.complete()

        summary = self.validation_summary()
        logger.info(
            f"Validation completed for depot {depot_id}: "
            f"{summary.available_count} available, {summary.unavailable_count} unavailable"
        )

    def _is_stale(self, depot_id: int) -> bool:
        if self._requested_depot == depot_id:
            return False
        logger.info(
            f"Discarding validation result for depot {depot_id}; "
            f"depot {self._requested_depot} is now selected"
        )
        self._state = self._state.discard()
        return True

    # ==================== Matching ====================

    def annotate(
        self,
        items: list[CartItem],
        variants: list[DepotVariant],
        depot_id: int,
    ) -> list[CartItem]:
        """Availability-annotated copies of items, in order"""
        by_product: dict[int, list[DepotVariant]] = {}
        for variant in variants:
            by_product.setdefault(variant.product_id, []).append(variant)

        return [
            self._annotate_item(item, by_product.get(item.product_id, []), depot_id)
            for item in items
        ]

    def _annotate_item(
        self,
        item: CartItem,
        candidates: list[DepotVariant],
        depot_id: int,
    ) -> CartItem:
        if not candidates:
            return _unavailable(item, REASON_NOT_IN_LOCATION)

        enabled = [v for v in candidates if v.is_enabled]
        if not enabled:
            if any(v.not_in_stock for v in candidates):
                return _unavailable(item, REASON_OUT_OF_STOCK)
            return _unavailable(item, REASON_UNAVAILABLE)

        variant = self._match_variant(item, enabled)
        if variant is None:
            return _unavailable(item, REASON_SIZE_UNAVAILABLE)

        if (
            self.enforce_closing_qty
            and variant.closing_qty is not None
            and variant.closing_qty < item.quantity
        ):
            return _unavailable(item, f"Only {variant.closing_qty} available")

        return item.model_copy(
            update={
                "variant_id": variant.id,
                "depot_id": depot_id,
                "price": buy_once_price(variant),
                "is_available": True,
                "unavailable_reason": None,
            }
        )

    def _match_variant(
        self,
        item: CartItem,
        enabled: list[DepotVariant],
    ) -> Optional[DepotVariant]:
        same_variant = next((v for v in enabled if v.id == item.variant_id), None)
        if same_variant is not None:
            return same_variant

        wanted = canonical_unit(item.variant_name)
        if wanted is None:
            label = item.variant_name.strip().lower()
            same_label = next((v for v in enabled if v.name.strip().lower() == label), None)
            return same_label or enabled[0]

        return next((v for v in enabled if canonical_unit(v.name) == wanted), None)

    # ==================== Applying results ====================

    def _apply(self, snapshot: list[CartItem], annotated: list[CartItem]) -> None:
        """
        Merge a pass result into the cart's current items in one replacement.

        Results are matched by the variant id an item had when the pass
        started; items added meanwhile are kept as they are, items removed
        meanwhile stay removed, and current quantities win.
        """
        results = {
            before.variant_id: after for before, after in zip(snapshot, annotated)
        }
        current = self.store.items

        proposed: list[CartItem] = []
        for item in current:
            result = results.get(item.variant_id)
            if result is None:
                proposed.append(item)
            else:
                proposed.append(result.model_copy(update={"quantity": item.quantity}))

        # Lines keeping their variant id claim it first
        used = {
            after.variant_id
            for before, after in zip(current, proposed)
            if after.variant_id == before.variant_id
        }
        final: list[CartItem] = []
        for before, after in zip(current, proposed):
            if after.variant_id != before.variant_id:
                if after.variant_id in used:
                    after = _unavailable(before, REASON_DUPLICATE)
                used.add(after.variant_id)
            final.append(after)

        self.store.replace_items(final)

    # ==================== Partitions ====================

    def available_items(self) -> list[CartItem]:
        return self.store.available_items()

    def unavailable_items(self) -> list[CartItem]:
        return self.store.unavailable_items()

    def validation_summary(self) -> ValidationSummary:
        return summarize_availability(self.store)

    def mark_unserviceable(self) -> None:
        """No depot serves the location: every item becomes unavailable"""
        self._requested_depot = None
        if not self._state.is_validating:
            self._state = ReconcileState()
        if self.store.is_empty:
            return
        self.store.replace_items(
            [_unavailable(it, REASON_NOT_IN_LOCATION) for it in self.store.items]
        )

    @property
    def phase(self) -> ReconcilePhase:
        return self._state.phase
