import sys
import os
from datetime import datetime

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def local_dt(*args):
    """Aware datetime for a local wall-clock time, like the date coercer returns."""
    return datetime(*args).astimezone()


@pytest.fixture
def make_record():
    def _make(**fields):
        rec = {
            "student_name": "Ada Lovelace",
            "age": 12,
            "team_name": "Robots",
            "team_number": 42,
            "checked_in": True,
            "checked_out": False,
            "check_in_date": local_dt(2024, 1, 3, 10, 0),
        }
        rec.update(fields)
        return rec
    return _make
