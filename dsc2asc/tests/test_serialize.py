"""Tests for ASC/CSV text serialization."""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from dsc2asc.analysis.serialize import format_number, serialize_pairs
from dsc2asc.models.formats import FORMATS, FormatProfile, get_format


def test_semicolon_dot_profile() -> None:
    p = FormatProfile(key="t", extension=".csv", delimiter=";", decimal_separator=".")
    assert serialize_pairs([10.0, 10.02], [123.4, 125.0], p) == "10.0000;123.4\n10.0200;125.0\n"


def test_semicolon_comma_profile() -> None:
    out = serialize_pairs([10.0, 10.02], np.array([123.4, 125.0], dtype="<f4"), FORMATS["csv_ru"])
    assert out == "10,0000;123,4\n10,0200;125,0\n"


def test_asc_and_csv_std() -> None:
    assert serialize_pairs([1.5], [2.0], FORMATS["asc"]) == "1.5000 2.0\n"
    assert serialize_pairs([1.5], [2.0], FORMATS["csv_std"]) == "1.5000,2.0\n"


def test_empty_input_gives_empty_text() -> None:
    assert serialize_pairs([], [], FORMATS["asc"]) == ""


def test_length_mismatch_fails_fast() -> None:
    with pytest.raises(ValueError):
        serialize_pairs([1.0, 2.0], [1.0], FORMATS["asc"])


def test_non_finite_literals() -> None:
    out = serialize_pairs([1.0, 2.0, 3.0], [np.nan, np.inf, -np.inf], FORMATS["csv_ru"])
    assert out == "1,0000;NaN\n2,0000;Infinity\n3,0000;-Infinity\n"


def test_rounding_precision() -> None:
    assert format_number(12.34567, 4) == "12.3457"
    assert format_number(99.96, 1) == "100.0"
    assert format_number(-0.26, 1) == "-0.3"


def test_exact_ties_round_half_away_from_zero() -> None:
    ys = np.array([123.25, 0.75, -2.25], dtype="<f4")
    assert serialize_pairs([10.0, 10.0, 10.0], ys, FORMATS["asc"]) == (
        "10.0000 123.3\n10.0000 0.8\n10.0000 -2.3\n"
    )
    assert format_number(2.5, 0) == "3"


def test_huge_values_keep_fixed_notation() -> None:
    out = format_number(float(np.float32(3.4e38)), 1)
    assert out.endswith(".0")
    assert "E" not in out and len(out) == 41


def test_custom_profile_without_code_change() -> None:
    tab = FormatProfile(key="tsv", extension=".tsv", delimiter="\t", decimal_separator=",",
                        mime_type="text/tab-separated-values", x_precision=2, y_precision=0)
    assert serialize_pairs([1.005, 2.5], [10.4, 11.6], tab) == "1,00\t10\n2,50\t12\n"


def test_idempotent() -> None:
    xs = 10.0 + np.arange(1000) * 0.02
    ys = np.random.default_rng(0).random(1000).astype("<f4") * 1000
    a = serialize_pairs(xs, ys, FORMATS["csv_ru"])
    b = serialize_pairs(xs, ys, FORMATS["csv_ru"])
    assert a == b
    assert a.count("\n") == 1000
    assert a.endswith("\n") and not a.endswith("\n\n")


def test_profile_dict_roundtrip_and_lookup() -> None:
    p = FORMATS["csv_ru"]
    assert FormatProfile.from_dict(p.to_dict()) == p
    assert get_format("asc").extension == ".asc"
    with pytest.raises(ValueError):
        get_format("xlsx")
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.delimiter = ","  # type: ignore[misc]
