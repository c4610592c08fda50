"""Weekly time calendar: hours per project member per day.

Weeks run Sunday through Saturday. Every call re-reads the project's time
entries and folds them in memory; nothing is cached between requests.
"""
from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple

from dateutil.relativedelta import relativedelta, SU
from sqlalchemy.orm import Session, joinedload

from app.core.time import today_utc
from app.models.time_entry import TimeEntry

UNKNOWN_USER_NAME = "Unknown"


def week_bounds(anchor: date) -> Tuple[date, date]:
    """Return the Sunday on or before ``anchor`` and the Saturday after it."""
    week_start = anchor + relativedelta(weekday=SU(-1))
    return week_start, week_start + timedelta(days=6)


def build_week_calendar(
    db: Session,
    project_id: int,
    week_start_date: Optional[date] = None,
) -> Dict[str, Any]:
    """Aggregate a project's time entries into a member x day matrix for one week.

    ``days`` only lists dates that have entries; a missing date means zero hours.
    Members appear in the order their first entry of the week was booked.
    """
    week_start, week_end = week_bounds(week_start_date or today_utc())

    entries = db.query(TimeEntry).options(joinedload(TimeEntry.user)).filter(
        TimeEntry.project_id == project_id
    ).order_by(TimeEntry.entry_date, TimeEntry.entry_id).all()

    members: Dict[int, Dict[str, Any]] = {}
    for entry in entries:
        if not (week_start <= entry.entry_date <= week_end):
            continue
        member = members.get(entry.user_id)
        if member is None:
            member = members[entry.user_id] = {
                "user_id": entry.user_id,
                "user_name": entry.user.full_name if entry.user else UNKNOWN_USER_NAME,
                "days": {},
                "week_total": 0.0,
            }
        member["days"][entry.entry_date] = member["days"].get(entry.entry_date, 0.0) + entry.hours
        member["week_total"] += entry.hours

    return {
        "week_start": week_start,
        "week_end": week_end,
        "members": [
            {
                **member,
                "days": [
                    {"date": day, "hours": hours}
                    for day, hours in sorted(member["days"].items())
                ],
            }
            for member in members.values()
        ],
    }


def daily_totals(calendar: Dict[str, Any]) -> Dict[date, float]:
    """Sum hours across all members for each date present in the calendar."""
    totals: Dict[date, float] = defaultdict(float)
    for member in calendar["members"]:
        for day in member["days"]:
            totals[day["date"]] += day["hours"]
    return dict(totals)


def grand_total(calendar: Dict[str, Any]) -> float:
    """Total hours booked by everyone in the calendar's week."""
    return sum(member["week_total"] for member in calendar["members"])
