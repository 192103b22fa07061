"""Delivery location API routes"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends

from ..engine import CartEngine
from ..models.delivery import DeliveryContext, DeliverySchedule
from .deps import get_engine

router = APIRouter(prefix="/api/delivery", tags=["Delivery"])


@router.post("/pincode/{pincode}", response_model=DeliveryContext)
async def select_pincode(pincode: str, engine: CartEngine = Depends(get_engine)):
    """Select the delivery location; reconciles the cart on depot change"""
    context = await engine.delivery.select_pincode(pincode)
    if context is None:
        raise HTTPException(status_code=404, detail="Service not available for this pincode")
    return context


@router.get("/context", response_model=Optional[DeliveryContext])
async def get_context(engine: CartEngine = Depends(get_engine)):
    """Current delivery location, if any"""
    return engine.delivery.context


@router.get("/dates", response_model=DeliverySchedule)
async def get_delivery_dates(
    today: Optional[date] = None,
    engine: CartEngine = Depends(get_engine),
):
    """Upcoming delivery dates for the current area"""
    return engine.delivery.delivery_dates(today=today)
