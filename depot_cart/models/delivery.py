"""Delivery location and schedule models"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class DeliveryContext(BaseModel):
    """The active depot selection, derived from a pincode"""
    depot_id: int
    depot_name: str = ""
    area_name: str = ""
    is_online: bool = True
    pincode: Optional[str] = None
    delivery_schedule: list[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class DeliveryDateOption(BaseModel):
    """A concrete, selectable delivery date"""
    delivery_date: date
    weekday: str
    label: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class DeliverySchedule(BaseModel):
    """Upcoming delivery dates for an area"""
    dates: list[DeliveryDateOption] = Field(default_factory=list)
    by_weekday: dict[str, list[date]] = Field(default_factory=dict)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @property
    def is_specified(self) -> bool:
        """An empty schedule means the area has no schedule configured"""
        return bool(self.dates)
