"""
Session time-window normalization.

Turns the wall-clock times entered on the session form into persistable
start/end timestamps anchored to a reference date, and clamps capacity.

Times are zero-padded 24-hour ``HH:MM`` strings, so string comparison
matches chronological order. No timezone handling is done anywhere here.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .exceptions import EmptyName, InvalidTimeOrder


DEFAULT_TIME_OF_DAY = '09:00'
DEFAULT_START_TIME = '09:00'
DEFAULT_END_TIME = '10:00'
DEFAULT_CAPACITY = 10

MIN_CAPACITY = 1
MAX_CAPACITY = 25

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

_DATE_PREFIX = re.compile(r'^\d{4}-\d{2}-\d{2}')
_TIME_AT_OFFSET = re.compile(r'^\d{4}-\d{2}-\d{2}[ T](\d{2}:\d{2})')


@dataclass(frozen=True)
class SessionTimeInput:
    """Raw values collected by the session form on submit."""
    name: str
    start_time: str
    end_time: str
    capacity_raw: int
    trainer_id: Optional[int] = None
    category_id: Optional[int] = None


@dataclass(frozen=True)
class SessionTimeWindow:
    """Validated start/end timestamps and capacity, ready to persist."""
    reference_date: str
    start_datetime: str
    end_datetime: str
    capacity: int

    def as_payload(self) -> dict:
        return {
            'start_date': self.start_datetime,
            'end_date': self.end_datetime,
            'capacity': self.capacity,
        }


def extract_time_of_day(timestamp: Optional[str] = None) -> str:
    """
    Get the ``HH:MM`` part of a ``YYYY-MM-DD HH:MM:SS`` timestamp.

    Absent or malformed input yields ``DEFAULT_TIME_OF_DAY``.
    """
    if not timestamp:
        return DEFAULT_TIME_OF_DAY
    match = _TIME_AT_OFFSET.match(timestamp)
    if match is None:
        return DEFAULT_TIME_OF_DAY
    return match.group(1)


def extract_date_part(timestamp: Optional[str] = None, today: Optional[date] = None) -> str:
    """
    Get the ``YYYY-MM-DD`` part of a timestamp.

    Falls back to the current date, evaluated at call time, when the
    timestamp is absent or does not start with a date.
    """
    if timestamp:
        match = _DATE_PREFIX.match(timestamp)
        if match is not None:
            return match.group(0)
    return (today or date.today()).isoformat()


def combine(date_part: str, time_part: str) -> str:
    """Join a date and an ``HH:MM`` time into a full timestamp (seconds are ``00``)."""
    return f"{date_part} {time_part}:00"


def clamp_capacity(capacity_raw: int) -> int:
    return min(max(capacity_raw, MIN_CAPACITY), MAX_CAPACITY)


def validate_and_build(
    form: SessionTimeInput,
    prior_start_timestamp: Optional[str] = None,
    today: Optional[date] = None
) -> SessionTimeWindow:
    """
    Validate a session form and build its time window.

    Args:
        form: Values entered on the form
        prior_start_timestamp: Stored start of the session being edited;
            None when creating a new session
        today: Date used when there is no prior timestamp (defaults to now)

    Returns:
        SessionTimeWindow anchored to the prior session's date, or today

    Raises:
        EmptyName: If the name is blank
        InvalidTimeOrder: If end time is not strictly after start time
    """
    if not form.name.strip():
        raise EmptyName()

    if form.end_time <= form.start_time:
        raise InvalidTimeOrder()

    capacity = clamp_capacity(form.capacity_raw)
    reference_date = extract_date_part(prior_start_timestamp, today=today)

    return SessionTimeWindow(
        reference_date=reference_date,
        start_datetime=combine(reference_date, form.start_time),
        end_datetime=combine(reference_date, form.end_time),
        capacity=capacity,
    )


def initial_form(
    name: str = '',
    start_timestamp: Optional[str] = None,
    end_timestamp: Optional[str] = None,
    capacity: Optional[int] = None,
    trainer_id: Optional[int] = None,
    category_id: Optional[int] = None
) -> SessionTimeInput:
    """
    Build the values a session form opens with.

    Editing passes the stored timestamps; a new session gets the defaults.
    """
    if start_timestamp is None and end_timestamp is None:
        return SessionTimeInput(
            name=name,
            start_time=DEFAULT_START_TIME,
            end_time=DEFAULT_END_TIME,
            capacity_raw=DEFAULT_CAPACITY if capacity is None else capacity,
            trainer_id=trainer_id,
            category_id=category_id,
        )

    return SessionTimeInput(
        name=name,
        start_time=extract_time_of_day(start_timestamp),
        end_time=extract_time_of_day(end_timestamp),
        capacity_raw=DEFAULT_CAPACITY if capacity is None else capacity,
        trainer_id=trainer_id,
        category_id=category_id,
    )
