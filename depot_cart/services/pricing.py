"""
Subscription pricing

Pure functions deriving unit price, MRP and savings for a product's depot
variants, and the delivery-schedule options legal for a subscription period.
Price defects (missing MRP, zero prices) degrade to 0, never raise.
"""

import logging
import math
import re
from datetime import date, timedelta
from typing import Iterable, Optional, Union

from ..core.config import settings
from ..models.pricing import (
    DeliveryChannel,
    PriceQuote,
    ScheduleOption,
    SCHEDULE_OPTIONS,
    SubscriptionEstimate,
    SubscriptionPeriod,
    Unit,
)
from ..models.product import DepotVariant
from .schedule import parse_weekday

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"[\s.]+")


def _normalize_label(label: str) -> str:
    return _WHITESPACE.sub("", label.strip().lower())


def build_alias_table(aliases: dict[str, list[str]]) -> dict[str, Unit]:
    """Flatten a canonical -> aliases mapping into normalized label -> Unit"""
    table: dict[str, Unit] = {}
    for canonical, labels in aliases.items():
        try:
            unit = Unit(canonical)
        except ValueError:
            logger.warning(f"Ignoring aliases for unknown unit {canonical!r}")
            continue
        table[_normalize_label(canonical)] = unit
        for label in labels:
            table[_normalize_label(label)] = unit
    return table


_DEFAULT_ALIAS_TABLE = build_alias_table(settings.unit_aliases)


def canonical_unit(
    label: Optional[str],
    aliases: Optional[dict[str, list[str]]] = None,
) -> Optional[Unit]:
    """Map a free-text unit label ("1 Ltrs", "1000ml") onto a Unit"""
    if not label:
        return None
    table = _DEFAULT_ALIAS_TABLE if aliases is None else build_alias_table(aliases)
    return table.get(_normalize_label(label))


# ==================== Variant selection ====================

def _unit_matches(variant: DepotVariant, label: str, wanted: Optional[Unit]) -> bool:
    """Exact label match, or both labels canonicalize to the same unit"""
    if _normalize_label(variant.name) == _normalize_label(label):
        return True
    return wanted is not None and canonical_unit(variant.name) == wanted


def select_variant(
    variants: Iterable[DepotVariant],
    channel: DeliveryChannel,
    unit: Union[Unit, str, None] = None,
    depot_id: Optional[int] = None,
) -> Optional[DepotVariant]:
    """
    Pick the canonical variant for a channel/unit combination.

    Home delivery keeps variants of online depots, pickup keeps the rest.
    A depot filter only applies to pickup; without one every pickup depot
    is considered ("compare all"). Returns the first survivor.
    """
    wanted_online = channel == DeliveryChannel.HOME
    label = unit.value if isinstance(unit, Unit) else unit
    wanted_unit = canonical_unit(label)

    for variant in variants:
        if variant.is_online is None or variant.is_online != wanted_online:
            continue
        if label is not None and not _unit_matches(variant, label, wanted_unit):
            continue
        if channel == DeliveryChannel.PICKUP and depot_id is not None:
            if variant.depot_id != depot_id:
                continue
        return variant
    return None


# ==================== Prices ====================

def _positive(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value) or value <= 0:
        return None
    return value


def buy_once_price(variant: Optional[DepotVariant]) -> float:
    if variant is None:
        return 0.0
    return _positive(variant.buy_once_price) or _positive(variant.mrp) or 0.0


def subscription_price(variant: Optional[DepotVariant], period: int) -> float:
    """Tiered subscription price; 0 for an unknown period or missing tier"""
    if variant is None:
        return 0.0
    tiers = {
        SubscriptionPeriod.THREE_DAYS: variant.price_3_day,
        SubscriptionPeriod.FIFTEEN_DAYS: variant.price_15_day,
        SubscriptionPeriod.ONE_MONTH: variant.price_1_month,
    }
    return _positive(tiers.get(period)) or 0.0


def mrp_price(variant: Optional[DepotVariant]) -> float:
    if variant is None:
        return 0.0
    return _positive(variant.mrp) or 0.0


def savings_percentage(mrp: float, price: float) -> int:
    """Percent saved against MRP, rounded half up, never negative"""
    if mrp <= 0 or price <= 0:
        return 0
    percent = math.floor((mrp - price) / mrp * 100 + 0.5)
    return max(0, percent)


def savings_amount(mrp: float, price: float) -> float:
    if mrp <= 0 or price <= 0:
        return 0.0
    return max(0.0, mrp - price)


def quote(
    variants: Iterable[DepotVariant],
    channel: DeliveryChannel,
    unit: Union[Unit, str, None] = None,
    period: Optional[int] = None,
    depot_id: Optional[int] = None,
) -> PriceQuote:
    """Price and savings for buy-once (period None) or a subscription period"""
    variant = select_variant(variants, channel, unit, depot_id)
    if variant is None:
        return PriceQuote(
            channel=channel,
            period=period,
            unit=unit if isinstance(unit, Unit) else canonical_unit(unit),
        )

    mrp = mrp_price(variant)
    price = buy_once_price(variant) if period is None else subscription_price(variant, period)
    return PriceQuote(
        variant_id=variant.id,
        depot_id=variant.depot_id,
        unit=canonical_unit(variant.name),
        channel=channel,
        period=period,
        price=price,
        mrp=mrp,
        savings_percent=savings_percentage(mrp, price),
        savings_amount=savings_amount(mrp, price),
    )


def price_matrix(
    variants: Iterable[DepotVariant],
    unit: Union[Unit, str, None] = None,
    depot_id: Optional[int] = None,
) -> dict[DeliveryChannel, list[PriceQuote]]:
    """Buy-once and every subscription period, per delivery channel"""
    variants = list(variants)
    matrix: dict[DeliveryChannel, list[PriceQuote]] = {}
    for channel in DeliveryChannel:
        quotes = [quote(variants, channel, unit, None, depot_id)]
        quotes.extend(
            quote(variants, channel, unit, int(period), depot_id)
            for period in SubscriptionPeriod
        )
        matrix[channel] = quotes
    return matrix


# ==================== Schedules ====================

def legal_schedule_options(period: int) -> list[ScheduleOption]:
    """Schedule options offered for a subscription period"""
    return [info.option for info in SCHEDULE_OPTIONS if period >= info.min_period]


def is_schedule_legal(option: ScheduleOption, period: int) -> bool:
    return option in legal_schedule_options(period)


def delivery_count(
    option: ScheduleOption,
    period: int,
    start_date: Optional[date] = None,
    selected_days: Iterable[str] = (),
) -> int:
    """Number of deliveries a schedule makes within the period"""
    if option == ScheduleOption.ALTERNATE_DAYS:
        return math.ceil(period / 2)
    if option == ScheduleOption.SELECT_DAYS:
        weekdays = {parse_weekday(day) for day in selected_days} - {None}
        if start_date is None or not weekdays:
            return 0
        return sum(
            1 for offset in range(period)
            if (start_date + timedelta(days=offset)).weekday() in weekdays
        )
    return period


def estimate_subscription(
    variant: Optional[DepotVariant],
    period: int,
    option: ScheduleOption,
    quantity: int = 1,
    second_quantity: Optional[int] = None,
    start_date: Optional[date] = None,
    selected_days: Iterable[str] = (),
) -> SubscriptionEstimate:
    """
    Totals for subscribing to a variant.

    day1-day2 alternates between `quantity` and `second_quantity` (default
    1), so the first quantity covers ceil(period / 2) days.
    """
    deliveries = delivery_count(option, period, start_date, selected_days)
    quantity = max(1, quantity)

    if option == ScheduleOption.DAY1_DAY2:
        second = max(1, second_quantity or 1)
        total_quantity = quantity * math.ceil(period / 2) + second * (period // 2)
    else:
        total_quantity = quantity * deliveries

    unit_price = subscription_price(variant, period)
    mrp = mrp_price(variant) or buy_once_price(variant)
    total_price = unit_price * total_quantity
    total_mrp = mrp * total_quantity

    return SubscriptionEstimate(
        variant_id=variant.id if variant else None,
        period=period,
        option=option,
        deliveries=deliveries,
        total_quantity=total_quantity,
        unit_price=unit_price,
        total_price=total_price,
        total_mrp=total_mrp,
        savings=max(0.0, total_mrp - total_price) if unit_price > 0 else 0.0,
    )
