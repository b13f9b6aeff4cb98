"""
Cell coercion: raw spreadsheet values -> typed record values.

Every parser here returns None when it cannot make sense of a value instead of
raising, so a bad cell only blanks that one field.
"""
from __future__ import annotations
import re
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional
import numpy as np
import pandas as pd
from dateutil import parser as dtparser
from .utils import is_missing, is_number, cell_text

TRUE_TOKENS = {"y", "yes", "true", "adult"}
FALSE_TOKENS = {"n", "no", "false", "youth", "child"}

# 2024-03-15 2:30PM -04:00
OFFSET_STAMP_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})\s+(\d{1,2}):(\d{2})\s*([AP]M)\s+([+-])(\d{2}):(\d{2})$",
    re.I,
)

# 1900 date system; serial 60 is the phantom 1900-02-29
_SERIAL_EPOCH = date(1899, 12, 30)
_SERIAL_EARLY_EPOCH = date(1899, 12, 31)
_SERIAL_MAX = 2958465  # 9999-12-31

# calendar days whose whole Sunday-Saturday week is representable
_FIRST_DAY = date(1, 1, 7)
_LAST_DAY = date(9999, 12, 24)


def _as_number(v: Any) -> Optional[float]:
    if isinstance(v, (bool, np.bool_)):
        return 1.0 if v else 0.0
    if isinstance(v, str):
        v = v.strip()
        # float() also takes "1_000" digit grouping
        if not v or "_" in v:
            return None
    elif not is_number(v):
        return None
    try:
        return float(v)
    except (ValueError, OverflowError):
        return None


def parse_number(value: Any) -> int | float | None:
    if is_missing(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    num = _as_number(value)
    if num is None or not math.isfinite(num):
        return None
    if num.is_integer():
        return int(num)
    return num


def parse_boolean_flag(value: Any) -> Optional[bool]:
    # tri-state: True / False / None (unknown)
    if is_missing(value):
        return None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if is_number(value):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        s = value.strip().lower()
        if s in TRUE_TOKENS:
            return True
        if s in FALSE_TOKENS:
            return False
    return None


def _local(dt: datetime) -> datetime:
    # naive values are local wall time
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def serial_to_date(serial: float) -> Optional[date]:
    """
    Spreadsheet serial day number -> calendar date. The time of day (fraction)
    is dropped.
    """
    if not math.isfinite(serial) or serial < 0 or serial > _SERIAL_MAX:
        return None
    days = int(math.floor(serial))
    if days < 60:
        return _SERIAL_EARLY_EPOCH + timedelta(days=days)
    if days == 60:
        return date(1900, 3, 1)
    return _SERIAL_EPOCH + timedelta(days=days)


def parse_offset_stamp(text: str) -> Optional[datetime]:
    """
    'YYYY-MM-DD H:MM AM/PM +HH:MM' -> UTC instant.

    The wall clock is read as if it were UTC and the stated offset is then
    taken off, so '2024-03-15 2:30PM -04:00' is 18:30 UTC.
    """
    m = OFFSET_STAMP_RE.match(text.strip())
    if not m:
        return None
    year, month, day = int(m.group(1)), int(m.group(2)), int(m.group(3))
    hour, minute = int(m.group(4)), int(m.group(5))
    hour = hour % 12 if m.group(6).upper() == "AM" else hour % 12 + 12
    sign = 1 if m.group(7) == "+" else -1
    offset_minutes = sign * (int(m.group(8)) * 60 + int(m.group(9)))
    try:
        wall = datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
        return wall - timedelta(minutes=offset_minutes)
    except (ValueError, OverflowError):
        return None


def _in_calendar(dt: datetime) -> bool:
    try:
        day = dt.astimezone().date()
    except (ValueError, OverflowError, OSError):
        return False
    return _FIRST_DAY <= day <= _LAST_DAY


def parse_date_value(value: Any) -> Optional[datetime]:
    """
    Tries, in order:
      1) datetime/date cells
      2) numbers as spreadsheet serial dates (local midnight)
      3) the explicit-offset stamp format
      4) ISO-8601
      5) free-form text
    Returns an aware datetime or None. Dates in the first or last week of
    the calendar (year 1, late 9999) count as unreadable.
    """
    dt = _coerce_date(value)
    if dt is None or not _in_calendar(dt):
        return None
    return dt


def _coerce_date(value: Any) -> Optional[datetime]:
    if is_missing(value):
        return None
    try:
        if isinstance(value, pd.Timestamp):
            value = value.to_pydatetime()
        if isinstance(value, datetime):
            return _local(value)
        if isinstance(value, date):
            return _local(datetime.combine(value, time()))
        if is_number(value):
            d = serial_to_date(float(value))
            return _local(datetime.combine(d, time())) if d else None
    except (ValueError, OverflowError, OSError):
        return None

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    stamp = parse_offset_stamp(text)
    if stamp is not None:
        return stamp

    for parse in (dtparser.isoparse, dtparser.parse):
        try:
            return _local(parse(text))
        except (ValueError, OverflowError, OSError):
            continue
    return None


def parse_text(value: Any) -> Optional[str]:
    if is_missing(value):
        return None
    return cell_text(value).strip()
