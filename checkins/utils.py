import os
import json
import math
import logging
from pathlib import Path
from typing import Any
import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = BASE_DIR / "data"

_ENV_DATA_DIR = os.environ.get("CHECKINS_DATA_DIR")
if _ENV_DATA_DIR:
    DATA_DIR = Path(_ENV_DATA_DIR)
else:
    DATA_DIR = DEFAULT_DATA_DIR  # fallback

DEFAULT_PREVIEW_LIMIT = 20

def load_json(path: Path, default: Any):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        logger.debug("Could not read %s, using defaults", path)
        return default

def rules_path() -> Path:
    return DATA_DIR / "rules.json"

def load_rules() -> dict:
    rules = load_json(rules_path(), {})
    if not isinstance(rules, dict):
        logger.warning("Ignoring %s: expected a JSON object", rules_path())
        return {}
    return rules

def preview_limit(rules: dict) -> int:
    try:
        n = int(rules.get("preview_limit", DEFAULT_PREVIEW_LIMIT))
    except (TypeError, ValueError):
        return DEFAULT_PREVIEW_LIMIT
    return n if n > 0 else DEFAULT_PREVIEW_LIMIT

def is_number(v: Any) -> bool:
    # bool is an int subclass but never a number for our purposes
    if isinstance(v, (bool, np.bool_)):
        return False
    return isinstance(v, (int, float, np.integer, np.floating))

def is_missing(v: Any) -> bool:
    # None, NaN, NaT and pd.NA; containers are never a single missing cell
    if v is None:
        return True
    if isinstance(v, (list, tuple, dict, set, np.ndarray)):
        return False
    return bool(pd.isna(v))

def cell_text(v: Any) -> str:
    """
    Renders a raw cell the way the spreadsheet shows it:
    - integral floats without '.0'
    - booleans as 'true'/'false'
    - missing values as ''
    """
    if is_missing(v):
        return ""
    if isinstance(v, (bool, np.bool_)):
        return "true" if v else "false"
    if isinstance(v, (int, np.integer)):
        return str(int(v))
    if isinstance(v, (float, np.floating)):
        f = float(v)
        if math.isfinite(f) and f.is_integer():
            return str(int(f))
        return str(v)
    return str(v)

def has_text(v: Any) -> bool:
    # a cell carries data unless it is missing or blank text
    if is_missing(v):
        return False
    if isinstance(v, str):
        return bool(v.strip())
    return True
