"""Delivery context: the active depot and its schedule"""

import logging
from datetime import date
from typing import Optional

from ..models.delivery import DeliveryContext, DeliverySchedule
from .catalog_client import DepotResolver
from .reconciler import CartReconciler
from .schedule import resolve_delivery_dates

logger = logging.getLogger(__name__)


class DeliveryService:
    """
    Holds the current delivery context and keeps the cart in step with it.

    Selecting a different depot triggers cart reconciliation; a pincode
    nobody serves marks the cart unavailable instead of failing.
    """

    def __init__(self, resolver: DepotResolver, reconciler: CartReconciler):
        self.resolver = resolver
        self.reconciler = reconciler
        self.context: Optional[DeliveryContext] = None

    async def select_pincode(self, pincode: str) -> Optional[DeliveryContext]:
        """Resolve a pincode and make its depot current; None means no service"""
        try:
            context = await self.resolver.resolve_depot_for_pincode(pincode)
        except Exception as e:
            logger.error(f"Depot resolution failed for pincode {pincode}: {e}")
            context = None

        if context is None:
            logger.info(f"No depot serves pincode {pincode}")
            self.context = None
            self.reconciler.mark_unserviceable()
            return None

        await self.select_context(context)
        return context

    async def select_context(self, context: DeliveryContext) -> None:
        """Make a resolved context current, reconciling on depot change"""
        previous = self.context
        self.context = context
        if previous is not None and previous.depot_id == context.depot_id:
            return
        logger.info(f"Active depot is now {context.depot_id} ({context.depot_name})")
        await self.reconciler.validate_cart(context.depot_id)

    async def restore(self, context: Optional[DeliveryContext]) -> None:
        """Initial load: adopt a remembered context and validate a non-empty cart"""
        if context is None:
            return
        self.context = context
        await self.reconciler.validate_cart(context.depot_id)

    @property
    def depot_id(self) -> Optional[int]:
        return self.context.depot_id if self.context else None

    def delivery_dates(self, today: Optional[date] = None) -> DeliverySchedule:
        """Upcoming delivery dates for the current area; empty if unspecified"""
        if self.context is None:
            return DeliverySchedule()
        return resolve_delivery_dates(self.context.delivery_schedule, today=today)
