from __future__ import annotations
from datetime import datetime
from typing import Dict, Any, List, Optional
from .utils import cell_text

PROFILE_FIELDS = ("county", "home_zip_code", "school_name", "age", "grade", "gender")


def _norm(s: Any) -> str:
    # key part: '' for missing, numbers as shown in the sheet, lower case
    if s is None:
        return ""
    return cell_text(s).strip().lower()


def record_name(r: Dict[str, Any]) -> str:
    name = r.get("student_name")
    if name:
        return str(name).strip()
    return f"{r.get('first_name') or ''} {r.get('last_name') or ''}".strip()


def profile_key(r: Dict[str, Any]) -> str:
    # name|age|team name|team number
    parts = [record_name(r), r.get("age"), r.get("team_name"), r.get("team_number")]
    return "|".join(_norm(p) for p in parts)


def has_check_in_date(r: Dict[str, Any]) -> bool:
    return isinstance(r.get("check_in_date"), datetime)


def build_unique_profiles(records: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    One profile per student (name + age + team), in first-seen order.
    Only rows with a name and a check-in date count. The first row seen for a
    student supplies the demographics; later rows do not overwrite them.
    """
    profiles: Dict[str, Dict[str, Any]] = {}
    for r in records:
        name = record_name(r)
        if not name or not has_check_in_date(r):
            continue
        key = profile_key(r)
        if key in profiles:
            continue
        profile = {"name": name}
        for f in PROFILE_FIELDS:
            profile[f] = r.get(f)
        profiles[key] = profile
    return profiles


def _active_key(r: Dict[str, Any]) -> str:
    return (r.get("email") or record_name(r)).strip().lower()


def _is_later(new: Optional[datetime], old: Optional[datetime]) -> bool:
    if new is None:
        return False
    if old is None:
        return True
    return new > old


def build_active_check_ins(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Students checked in and not yet checked out, one entry per email (or name
    when there is no email). The most recent check-in per student is kept;
    ties keep the earlier row. Sorted by display name.
    """
    latest: Dict[str, Dict[str, Any]] = {}
    for r in records:
        if r.get("checked_in") is not True or r.get("checked_out") is True:
            continue
        key = _active_key(r)
        if not key:
            continue
        ci = r.get("check_in_date")
        existing = latest.get(key)
        if existing is not None and not _is_later(ci, existing["check_in_date"]):
            continue
        latest[key] = {
            "id": key,
            "name": record_name(r) or r.get("email") or "Unknown",
            "email": r.get("email"),
            "team_name": r.get("team_name"),
            "team_number": r.get("team_number"),
            "check_in_date": ci,
        }
    return sorted(latest.values(), key=lambda e: e["name"].lower())
