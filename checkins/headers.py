from __future__ import annotations
import re
import logging
from typing import Any, Dict, Optional
from .utils import load_rules

logger = logging.getLogger(__name__)

_NEWLINES_RE = re.compile(r"(?:\r?\n)+")
_PARENS_RE = re.compile(r"\(.*?\)")
_NOT_KEY_CHARS_RE = re.compile(r"[^a-z0-9?]+")

# normalized header -> record field
COLUMN_MAP: Dict[str, str] = {
    "name": "student_name",
    "studentname": "student_name",
    "firstname": "first_name",
    "lastname": "last_name",
    "schoolname": "school_name",
    "homezipcode": "home_zip_code",
    "county": "county",
    "grade": "grade",
    "gender": "gender",
    "age": "age",
    "dateoffirstvisit": "first_visit_date",
    "numberofsiblings": "siblings",
    "numberofparentsinhousehold": "parents_guardians",
    "careerinterest": "career_interest",
    "hobbies": "hobbies",
    "adult?": "is_adult",
    "teamname": "team_name",
    "teamnumber": "team_number",
    "email": "email",
    "checkedin": "checked_in",
    "checkedout": "checked_out",
    "checkindate": "check_in_date",
    "checkoutdate": "check_out_date",
    "elapsedtime": "elapsed_time",
}

# field -> coercer kind; anything not listed here is text
FIELD_TYPES: Dict[str, str] = {
    "checked_in": "bool",
    "checked_out": "bool",
    "is_adult": "bool",
    "age": "number",
    "siblings": "number",
    "parents_guardians": "number",
    "team_number": "number",
    "elapsed_time": "number",
    "first_visit_date": "date",
    "check_in_date": "date",
    "check_out_date": "date",
}

RECORD_FIELDS = sorted(set(COLUMN_MAP.values()))


def normalize_header_key(key: Any) -> str:
    """
    Lookup key for a column label:
    - lower case, newlines folded to spaces
    - parenthesized notes like '(min)' removed
    - '&amp;' spelled out as 'and'
    - only a-z, 0-9 and '?' kept
    """
    if key is None:
        return ""
    s = str(key).lower()
    s = _NEWLINES_RE.sub(" ", s)
    s = _PARENS_RE.sub("", s)
    s = s.replace("&amp;", "and")
    s = _NOT_KEY_CHARS_RE.sub("", s)
    return s.strip()


def _build_column_map(rules: Dict[str, Any]) -> Dict[str, str]:
    mapping = dict(COLUMN_MAP)
    aliases = rules.get("header_aliases", {})
    if not isinstance(aliases, dict):
        logger.warning("header_aliases must be an object, ignoring it")
        return mapping

    known = set(RECORD_FIELDS)
    for raw_key, field in aliases.items():
        key = normalize_header_key(raw_key)
        if not key or field not in known:
            logger.warning("Ignoring header alias %r -> %r", raw_key, field)
            continue
        if key in COLUMN_MAP:
            continue
        mapping[key] = field
    return mapping


ACTIVE_COLUMN_MAP = _build_column_map(load_rules())


def lookup_field(header: Any, column_map: Optional[Dict[str, str]] = None) -> Optional[str]:
    # None means the column is not one we read
    mapping = ACTIVE_COLUMN_MAP if column_map is None else column_map
    key = normalize_header_key(header)
    if not key:
        return None
    return mapping.get(key)


def field_type(field: str) -> str:
    return FIELD_TYPES.get(field, "text")
