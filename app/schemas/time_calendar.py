"""Schemas for the weekly time calendar."""
from datetime import date
from typing import List
from pydantic import BaseModel, field_serializer


class CalendarDay(BaseModel):
    date: date
    hours: float

    @field_serializer("hours")
    def round_hours(self, hours: float) -> float:
        return round(hours, 1)


class CalendarMember(BaseModel):
    user_id: int
    user_name: str
    days: List[CalendarDay]  # only dates with booked hours
    week_total: float

    @field_serializer("week_total")
    def round_week_total(self, week_total: float) -> float:
        return round(week_total, 1)


class TimeCalendarResponse(BaseModel):
    week_start: date
    week_end: date
    members: List[CalendarMember]
