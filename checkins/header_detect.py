from __future__ import annotations
import logging
from typing import Any, List, Sequence
from .headers import lookup_field
from .utils import is_number, cell_text

logger = logging.getLogger(__name__)

MIN_HEADER_MATCHES = 2


def header_label(v: Any) -> str:
    # only text and number cells can be column labels
    if isinstance(v, str) or is_number(v):
        return cell_text(v).strip()
    return ""


def row_header_score(row: Sequence[Any]) -> int:
    # how many cells of the row name a column we know
    score = 0
    for v in row:
        label = header_label(v)
        if not label:
            continue
        if lookup_field(label):
            score += 1
    return score


def detect_header_row(rows: List[Sequence[Any]]) -> int:
    """
    Index of the row that looks most like the header.
    Exports often carry a title banner or notes above the real header, so every
    row is scored by the number of recognized column names. The best row wins
    when it has at least MIN_HEADER_MATCHES hits; ties keep the earlier row;
    otherwise row 0 is used.
    """
    best = 0
    best_score = -1
    for idx, row in enumerate(rows):
        if not row:
            continue
        score = row_header_score(row)
        if score > best_score and score >= MIN_HEADER_MATCHES:
            best_score = score
            best = idx

    logger.info("Header row: %d (%d recognized columns)", best, max(best_score, 0))
    return best
