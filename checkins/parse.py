from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence
from .headers import lookup_field, field_type, normalize_header_key
from .coerce import parse_number, parse_boolean_flag, parse_date_value, parse_text
from .header_detect import detect_header_row, header_label
from .utils import has_text

logger = logging.getLogger(__name__)

_COERCERS = {
    "bool": parse_boolean_flag,
    "number": parse_number,
    "date": parse_date_value,
    "text": parse_text,
}


def _is_filled(kind: str, value: Any) -> bool:
    if kind == "text":
        return bool(value)
    return value is not None


def parse_row(row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    One sheet row (header label -> raw cell) -> student record.

    Columns we don't know are skipped. The row is dropped (None) when no known
    column produced a value.
    """
    record: Dict[str, Any] = {}
    has_mapped_value = False

    for header, raw in row.items():
        key = normalize_header_key(str(header).strip())
        if not key:
            continue
        field = lookup_field(key)
        if not field:
            logger.debug("Unmapped column %r (%s)", header, key)
            continue

        kind = field_type(field)
        value = _COERCERS[kind](raw)
        record[field] = value
        if _is_filled(kind, value):
            has_mapped_value = True

    if not record.get("student_name"):
        parts = [record.get("first_name"), record.get("last_name")]
        composite = " ".join(p for p in parts if p).strip()
        if composite:
            record["student_name"] = composite

    return record if has_mapped_value else None


def header_labels(header_row: Sequence[Any]) -> List[str]:
    return [header_label(v) for v in header_row]


def rows_to_raw_records(rows: List[Sequence[Any]], header_index: int) -> List[Dict[str, Any]]:
    """
    Pairs every data row below the header with the header labels.
    - columns without a label are dropped
    - cells past the end of a short row are dropped, empty cells (None) are kept
    - rows with no text at all are skipped
    """
    if not rows:
        return []
    labels = header_labels(rows[header_index] if header_index < len(rows) else [])

    out: List[Dict[str, Any]] = []
    for row in rows[header_index + 1:]:
        if not row or not any(has_text(v) for v in row):
            continue
        raw: Dict[str, Any] = {}
        for col, label in enumerate(labels):
            if not label:
                continue
            if col >= len(row):
                continue
            # a repeated label keeps its first position and the last value
            raw[label] = row[col]
        if any(has_text(v) for v in raw.values()):
            out.append(raw)
    return out


def parse_sheet(rows: List[Sequence[Any]]) -> List[Dict[str, Any]]:
    # whole first sheet (rows of cells, no header assumed) -> student records
    if not rows:
        return []
    header_index = detect_header_row(rows)
    raw_records = rows_to_raw_records(rows, header_index)

    records: List[Dict[str, Any]] = []
    for raw in raw_records:
        rec = parse_row(raw)
        if rec is not None:
            records.append(rec)

    dropped = len(raw_records) - len(records)
    logger.info("Parsed %d records (%d rows without known columns dropped)", len(records), dropped)
    return records
