"""Pricing API routes"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ..core.errors import CatalogLookupError
from ..engine import CartEngine
from ..models.pricing import (
    DeliveryChannel,
    PriceQuote,
    ScheduleOption,
    SCHEDULE_OPTIONS,
    SubscriptionEstimate,
)
from ..models.product import DepotVariant
from ..services import pricing
from .deps import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pricing", tags=["Pricing"])


class EstimateRequest(BaseModel):
    """Request to estimate a subscription"""
    product_id: int
    variant_id: int
    period: int = Field(gt=0)
    option: ScheduleOption = ScheduleOption.DAILY
    quantity: int = Field(default=1, gt=0)
    second_quantity: Optional[int] = Field(default=None, gt=0)
    start_date: Optional[date] = None
    selected_days: list[str] = []

    class Config:
        alias_generator = to_camel
        populate_by_name = True


async def _product_variants(engine: CartEngine, product_id: int) -> list[DepotVariant]:
    try:
        variants = await engine.catalog.get_all_variants_for_product(product_id)
    except CatalogLookupError as e:
        logger.error(f"Variant lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Catalog unavailable, please retry")
    if not variants:
        raise HTTPException(status_code=404, detail="Product not found")
    return variants


@router.get("/quote", response_model=PriceQuote)
async def get_quote(
    product_id: int,
    channel: DeliveryChannel = DeliveryChannel.HOME,
    unit: Optional[str] = None,
    period: Optional[int] = Query(default=None, gt=0),
    depot_id: Optional[int] = None,
    engine: CartEngine = Depends(get_engine),
):
    """Price and savings for one selection; omit period for buy once"""
    variants = await _product_variants(engine, product_id)
    return pricing.quote(variants, channel, unit, period, depot_id)


@router.get("/matrix", response_model=dict[DeliveryChannel, list[PriceQuote]])
async def get_price_matrix(
    product_id: int,
    unit: Optional[str] = None,
    depot_id: Optional[int] = None,
    engine: CartEngine = Depends(get_engine),
):
    """Compare buy once and every subscription period across channels"""
    variants = await _product_variants(engine, product_id)
    return pricing.price_matrix(variants, unit, depot_id)


@router.get("/schedules")
async def get_schedule_options(period: int = Query(gt=0)):
    """Delivery schedule options legal for a subscription period"""
    legal = set(pricing.legal_schedule_options(period))
    return [
        {
            "id": info.option.value,
            "label": info.label,
            "description": info.description,
            "minPeriod": info.min_period,
        }
        for info in SCHEDULE_OPTIONS
        if info.option in legal
    ]


@router.post("/estimate", response_model=SubscriptionEstimate)
async def estimate(
    request: EstimateRequest,
    engine: CartEngine = Depends(get_engine),
):
    """Totals and savings for a subscription"""
    if not pricing.is_schedule_legal(request.option, request.period):
        raise HTTPException(
            status_code=400,
            detail=f"'{request.option.value}' is not offered for {request.period} day subscriptions",
        )

    variants = await _product_variants(engine, request.product_id)
    variant = next((v for v in variants if v.id == request.variant_id), None)
    if not variant:
        raise HTTPException(status_code=404, detail="Variant not found")

    return pricing.estimate_subscription(
        variant,
        request.period,
        request.option,
        quantity=request.quantity,
        second_quantity=request.second_quantity,
        start_date=request.start_date,
        selected_days=request.selected_days,
    )
