from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd
from .dedupe import record_name, profile_key, build_unique_profiles, build_active_check_ins
from .aggregate import category_breakdowns, total_check_ins, monthly_counts, weekly_counts, MONTH_NAMES
from .utils import DEFAULT_PREVIEW_LIMIT

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

PREVIEW_COLUMNS = [
    ("student_name", "Student"),
    ("school_name", "School"),
    ("county", "County"),
    ("home_zip_code", "Zip"),
    ("grade", "Grade"),
    ("gender", "Gender"),
    ("age", "Age"),
    ("is_adult", "Adult?"),
    ("team_name", "Team Name"),
    ("team_number", "Team #"),
]

BREAKDOWN_TITLES = {
    "county": "County",
    "grade": "Grade",
    "gender": "Gender",
    "home_zip_code": "Zip Code",
    "school_name": "School",
    "age": "Age",
}


def build_dashboard(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Every derived view of one loaded file. Recomputed from scratch for each
    record list; nothing is carried over from a previous file.
    """
    profiles = build_unique_profiles(records)
    return {
        "records": records,
        "profiles": profiles,
        "unique_students": len(profiles),
        "total_check_ins": total_check_ins(records),
        "breakdowns": category_breakdowns(profiles),
        "monthly": monthly_counts(records),
        "weekly": weekly_counts(records),
        "active_check_ins": build_active_check_ins(records),
    }


def _previewable(r: Dict[str, Any]) -> bool:
    return bool(
        record_name(r)
        and (r.get("school_name") or "").strip()
        and r.get("age") is not None
        and r.get("is_adult") is not None
        and (r.get("gender") or "").strip()
    )


def preview_records(records: List[Dict[str, Any]], limit: int = DEFAULT_PREVIEW_LIMIT) -> Tuple[List[Dict[str, Any]], int]:
    # first row per student with all display fields filled; (rows, total)
    seen = set()
    rows: List[Dict[str, Any]] = []
    for r in records:
        if not _previewable(r):
            continue
        key = profile_key(r)
        if key in seen:
            continue
        seen.add(key)
        rows.append(r)
    return rows[:limit], len(rows)


def visit_history(records: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    entries = []
    for r in records:
        if profile_key(r) != key:
            continue
        entries.append({
            "check_in": r.get("check_in_date"),
            "check_out": r.get("check_out_date"),
            "elapsed_time": r.get("elapsed_time"),
        })
    entries.sort(key=lambda e: e["check_in"] or e["check_out"] or _EPOCH)
    return entries


def format_date_time(dt: Optional[datetime]) -> str:
    # 'Mar 15, 2024, 2:30 PM' in local time
    if dt is None:
        return "—"
    local = dt.astimezone()
    hour = local.hour % 12 or 12
    ampm = "AM" if local.hour < 12 else "PM"
    month = MONTH_NAMES[local.month - 1][:3]
    return f"{month} {local.day}, {local.year}, {hour}:{local.minute:02d} {ampm}"


def _display(v: Any) -> Any:
    if v is None or v == "":
        return "—"
    if isinstance(v, bool):
        return "Yes" if v else "No"
    return v


def records_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    data = [{title: _display(r.get(field)) for field, title in PREVIEW_COLUMNS} for r in rows]
    return pd.DataFrame(data, columns=[title for _, title in PREVIEW_COLUMNS])


def counts_frame(counts: Dict[str, int], label: str, value: str = "Students") -> pd.DataFrame:
    # keeps the mapping order (chronological for time buckets)
    return pd.DataFrame({label: list(counts.keys()), value: list(counts.values())})


def history_frame(entries: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Check-in Time": [format_date_time(e["check_in"]) for e in entries],
            "Check-out Time": [format_date_time(e["check_out"]) for e in entries],
            "Elapsed Time (min)": [_display(e["elapsed_time"]) for e in entries],
        },
        columns=["Check-in Time", "Check-out Time", "Elapsed Time (min)"],
    )


def active_frame(entry: Dict[str, Any]) -> pd.DataFrame:
    return pd.DataFrame([{
        "Team Name": _display(entry.get("team_name")),
        "Team Number": _display(entry.get("team_number")),
        "Check-in Time": format_date_time(entry.get("check_in_date")),
    }])
