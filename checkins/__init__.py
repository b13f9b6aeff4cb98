"""
This package contains:
- reading the first sheet of a check-in export (XLSX/XLS)
- header row detection and header normalization
- cell coercion (numbers, yes/no flags, dates)
- student identity deduplication
- breakdowns, activity over time and active check-ins
"""
from .headers import normalize_header_key, lookup_field, COLUMN_MAP
from .coerce import parse_number, parse_boolean_flag, parse_date_value, parse_text
from .header_detect import detect_header_row
from .parse import parse_row, rows_to_raw_records, parse_sheet
from .ingest import SheetError, load_first_sheet, load_records
from .dedupe import record_name, profile_key, build_unique_profiles, build_active_check_ins
from .aggregate import (category_counts, category_breakdowns, total_check_ins, monthly_counts, weekly_counts)
from .views import build_dashboard, preview_records, visit_history

__all__ = [
    "normalize_header_key",
    "lookup_field",
    "COLUMN_MAP",
    "parse_number",
    "parse_boolean_flag",
    "parse_date_value",
    "parse_text",
    "detect_header_row",
    "parse_row",
    "rows_to_raw_records",
    "parse_sheet",
    "SheetError",
    "load_first_sheet",
    "load_records",
    "record_name",
    "profile_key",
    "build_unique_profiles",
    "build_active_check_ins",
    "category_counts",
    "category_breakdowns",
    "total_check_ins",
    "monthly_counts",
    "weekly_counts",
    "build_dashboard",
    "preview_records",
    "visit_history",
]
