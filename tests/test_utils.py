"""Unit tests for shared helpers and configuration."""

from datetime import datetime

import numpy as np
import pandas as pd

from checkins.utils import cell_text, has_text, is_missing, load_json, preview_limit


def test_cell_text():
    assert cell_text(12) == "12"
    assert cell_text(12.0) == "12"
    assert cell_text(np.float64(27601.0)) == "27601"
    assert cell_text(12.5) == "12.5"
    assert cell_text(False) == "false"
    assert cell_text(None) == ""
    assert cell_text(float("nan")) == ""
    assert cell_text(" Wake ") == " Wake "


def test_has_text():
    assert has_text("x")
    assert has_text(0)
    assert has_text(False)
    assert has_text(datetime(2024, 1, 1))
    assert not has_text("   ")
    assert not has_text(None)
    assert not has_text(float("nan"))
    assert not has_text(pd.NaT)


def test_is_missing():
    assert is_missing(None)
    assert is_missing(np.nan)
    assert is_missing(pd.NaT)
    assert not is_missing("")
    assert not is_missing(0)


def test_load_json_falls_back(tmp_path):
    assert load_json(tmp_path / "missing.json", {"a": 1}) == {"a": 1}
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_json(bad, {}) == {}
    good = tmp_path / "rules.json"
    good.write_text('{"preview_limit": 5}', encoding="utf-8")
    assert load_json(good, {}) == {"preview_limit": 5}


def test_preview_limit():
    assert preview_limit({}) == 20
    assert preview_limit({"preview_limit": 5}) == 5
    assert preview_limit({"preview_limit": "many"}) == 20
    assert preview_limit({"preview_limit": 0}) == 20


def test_cell_text_wide_integers():
    assert cell_text(10**400) == str(10**400)
    assert cell_text(np.int64(-7)) == "-7"
    assert cell_text(float("inf")) == "inf"
