"""Pricing and subscription models"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class DeliveryChannel(str, Enum):
    """How the order reaches the customer"""
    HOME = "home"
    PICKUP = "pickup"


class SubscriptionPeriod(IntEnum):
    """Subscription horizons, in days"""
    THREE_DAYS = 3
    FIFTEEN_DAYS = 15
    ONE_MONTH = 30


class ScheduleOption(str, Enum):
    """Delivery schedule patterns within a subscription"""
    DAILY = "daily"
    ALTERNATE_DAYS = "alternate-days"
    DAY1_DAY2 = "day1-day2"
    SELECT_DAYS = "select-days"


class Unit(str, Enum):
    """Canonical pack units"""
    ML_200 = "200ml"
    ML_250 = "250ml"
    ML_500 = "500ml"
    L_1 = "1L"
    L_2 = "2L"
    L_5 = "5L"
    G_250 = "250g"
    G_500 = "500g"
    KG_1 = "1kg"


@dataclass(frozen=True)
class ScheduleOptionInfo:
    """Display data and gating for a schedule option"""
    option: ScheduleOption
    label: str
    description: str
    min_period: int


SCHEDULE_OPTIONS: tuple[ScheduleOptionInfo, ...] = (
    ScheduleOptionInfo(ScheduleOption.DAILY, "Daily", "Every day delivery", 3),
    ScheduleOptionInfo(
        ScheduleOption.ALTERNATE_DAYS, "Alternate Days", "Every other day (15+ days only)", 15
    ),
    ScheduleOptionInfo(
        ScheduleOption.DAY1_DAY2, "Day 1-Day 2", "Varying quantities (15+ days only)", 15
    ),
    ScheduleOptionInfo(
        ScheduleOption.SELECT_DAYS, "Weekdays", "Custom days selection (30 days only)", 30
    ),
)


class PriceQuote(BaseModel):
    """Effective price and savings for one channel/unit/period selection"""
    variant_id: Optional[int] = None
    depot_id: Optional[int] = None
    unit: Optional[Unit] = None
    channel: DeliveryChannel
    period: Optional[int] = None  # None means buy once
    price: float = 0.0
    mrp: float = 0.0
    savings_percent: int = 0
    savings_amount: float = 0.0

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @property
    def available(self) -> bool:
        return self.variant_id is not None


class SubscriptionEstimate(BaseModel):
    """Totals for a subscription of one variant"""
    variant_id: Optional[int] = None
    period: int
    option: ScheduleOption
    deliveries: int
    total_quantity: int
    unit_price: float
    total_price: float
    total_mrp: float
    savings: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True
