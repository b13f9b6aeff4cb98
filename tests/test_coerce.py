"""Unit tests for cell coercion."""

from datetime import date, datetime, timezone

import numpy as np
import pandas as pd
import pytest

from checkins.coerce import (
    parse_number,
    parse_boolean_flag,
    parse_date_value,
    parse_offset_stamp,
    parse_text,
    serial_to_date,
)
from conftest import local_dt


def test_parse_number():
    assert parse_number("12") == 12
    assert isinstance(parse_number("12"), int)
    assert parse_number(12.0) == 12
    assert isinstance(parse_number(12.0), int)
    assert parse_number(" 12.5 ") == 12.5
    assert parse_number(np.int64(7)) == 7
    assert parse_number(np.float64(3.25)) == 3.25
    assert parse_number(0) == 0


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "1,000", "1_000", "0x1A", float("nan"), "inf", float("-inf"), 10**400])
def test_parse_number_absent(raw):
    assert parse_number(raw) is None


@pytest.mark.parametrize("raw,expected", [
    ("Y", True),
    (" yes ", True),
    ("TRUE", True),
    ("Adult", True),
    ("n", False),
    ("No", False),
    ("false", False),
    ("Youth", False),
    ("Child", False),
    (True, True),
    (False, False),
    (np.bool_(True), True),
    (1, True),
    (0, False),
    (1.0, True),
    (np.int64(0), False),
    ("", None),
    ("   ", None),
    (None, None),
    (2, None),
    (-1, None),
    ("maybe", None),
    ("1", None),
])
def test_parse_boolean_flag(raw, expected):
    assert parse_boolean_flag(raw) is expected


def test_offset_stamp_is_converted_to_utc():
    expected = datetime(2024, 3, 15, 18, 30, tzinfo=timezone.utc)
    assert parse_date_value("2024-03-15 2:30PM -04:00") == expected
    assert parse_date_value("2024-03-15 2:30 pm -04:00") == expected
    assert parse_offset_stamp("2024-03-15 12:05AM +05:30") == datetime(2024, 3, 14, 18, 35, tzinfo=timezone.utc)
    assert parse_offset_stamp("2024-03-15 12:05PM +00:00") == datetime(2024, 3, 15, 12, 5, tzinfo=timezone.utc)


def test_offset_stamp_rejects_other_formats():
    assert parse_offset_stamp("2024-03-15 14:30") is None
    assert parse_offset_stamp("2024-03-15 2:30PM") is None
    assert parse_offset_stamp("2024-13-45 2:30PM -04:00") is None


def test_datetime_cells_pass_through():
    dt = datetime(2024, 1, 5, 9, 15)
    parsed = parse_date_value(dt)
    assert parsed.tzinfo is not None
    assert parsed.astimezone().replace(tzinfo=None) == dt

    aware = datetime(2024, 1, 5, 9, 15, tzinfo=timezone.utc)
    assert parse_date_value(aware) == aware

    assert parse_date_value(date(2024, 1, 5)) == local_dt(2024, 1, 5)
    assert parse_date_value(pd.Timestamp("2024-01-05 09:15")) == local_dt(2024, 1, 5, 9, 15)


def test_serial_dates():
    assert serial_to_date(1) == date(1900, 1, 1)
    assert serial_to_date(59) == date(1900, 2, 28)
    assert serial_to_date(60) == date(1900, 3, 1)
    assert serial_to_date(61) == date(1900, 3, 1)
    assert serial_to_date(45292) == date(2024, 1, 1)
    assert serial_to_date(-1) is None
    assert serial_to_date(3_000_000) is None


@pytest.mark.parametrize("serial", [45292, 45292.0, 45292.25, 45292.999])
def test_serial_date_ignores_time_of_day(serial):
    parsed = parse_date_value(serial)
    assert parsed == local_dt(2024, 1, 1)
    assert parsed.astimezone().date() == date(2024, 1, 1)


def test_iso_and_free_form_strings():
    assert parse_date_value("2024-01-05") == local_dt(2024, 1, 5)
    assert parse_date_value("2024-01-05T10:30:00Z") == datetime(2024, 1, 5, 10, 30, tzinfo=timezone.utc)
    assert parse_date_value("January 5, 2024 10:30 AM") == local_dt(2024, 1, 5, 10, 30)
    assert parse_date_value("1/5/2024") == local_dt(2024, 1, 5)


@pytest.mark.parametrize("raw", [None, "", "   ", "not a date", True, float("nan"), [2024]])
def test_parse_date_value_absent(raw):
    assert parse_date_value(raw) is None


def test_parse_text():
    assert parse_text("  Wake  ") == "Wake"
    assert parse_text(27601) == "27601"
    assert parse_text(27601.0) == "27601"
    assert parse_text(True) == "true"
    assert parse_text("") == ""
    assert parse_text(None) is None
    assert parse_text(float("nan")) is None
    assert parse_text(10**400) == str(10**400)


@pytest.mark.parametrize("raw", [
    "0001-01-03T12:00:00Z",
    "0001-01-01",
    datetime(1, 1, 3, 12, 0),
    datetime(1, 1, 2, tzinfo=timezone.utc),
    date(1, 1, 1),
    "9999-12-30",
    datetime(9999, 12, 31, tzinfo=timezone.utc),
])
def test_dates_at_calendar_edges_are_absent(raw):
    assert parse_date_value(raw) is None


def test_dates_near_calendar_edges_are_kept():
    assert parse_date_value("0001-01-10T12:00:00Z") == datetime(1, 1, 10, 12, 0, tzinfo=timezone.utc)
    assert parse_date_value("9999-12-20T12:00:00Z") == datetime(9999, 12, 20, 12, 0, tzinfo=timezone.utc)
