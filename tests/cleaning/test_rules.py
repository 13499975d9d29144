"""Tests for individual field rules."""

import datetime

import numpy as np
import pandas as pd
import pytest

from layoffs.cleaning.rules import (
    build_default_rules,
    coerce_amount,
    coerce_count,
    coerce_fraction,
    collapse_prefix,
    is_absent,
    parse_dates,
    strip_trailing_periods,
    strip_whitespace,
)

pytestmark = pytest.mark.unit

TOKENS = ["", "NULL"]


def _series(*values):
    return pd.Series(list(values), dtype=object)


class TestTextRules:

    def test_strip_whitespace(self):
        out = strip_whitespace("company").apply(_series(" Acme ", "Beta", None))
        assert out.tolist() == ["Acme", "Beta", None]

    def test_collapse_prefix(self):
        rule = collapse_prefix("industry", "Crypto", "Crypto")
        out = rule.apply(_series("Crypto1234", "Crypto Currency", "CryptoCurrency", "Retail", None))
        assert out.tolist() == ["Crypto", "Crypto", "Crypto", "Retail", None]

    def test_collapse_prefix_is_case_sensitive(self):
        rule = collapse_prefix("industry", "Crypto", "Crypto")
        assert rule.apply(_series("crypto")).tolist() == ["crypto"]

    def test_strip_trailing_periods_only_for_listed_names(self):
        rule = strip_trailing_periods("country", ["United States"])
        out = rule.apply(_series("United States.", "United States..", "Canada", "Canada.", None))
        assert out.tolist() == ["United States", "United States", "Canada", "Canada.", None]

    def test_strip_trailing_periods_with_no_names_is_identity(self):
        rule = strip_trailing_periods("country", [])
        assert rule.apply(_series("United States.")).tolist() == ["United States."]

    @pytest.mark.parametrize("rule", [
        strip_whitespace("company"),
        collapse_prefix("industry", "Crypto", "Crypto"),
        strip_trailing_periods("country", ["United States"]),
    ])
    def test_text_rules_are_idempotent(self, rule):
        values = _series("  Crypto x ", "United States...", None, "")
        once = rule.apply(values)
        assert rule.apply(once).tolist() == once.tolist()


class TestDateRule:

    def test_month_day_year(self):
        out = parse_dates("date", ["%m/%d/%Y"], TOKENS).apply(_series("3/9/2023", "12/31/2022"))
        assert out.dtype == "datetime64[ns]"
        assert out.tolist() == [pd.Timestamp(2023, 3, 9), pd.Timestamp(2022, 12, 31)]

    def test_unparseable_and_impossible_dates_become_absent(self):
        out = parse_dates("date", ["%m/%d/%Y"], TOKENS).apply(_series("not-a-date", "2/30/2023"))
        assert out.isna().all()

    def test_null_tokens_become_absent(self):
        out = parse_dates("date", ["%m/%d/%Y"], TOKENS).apply(_series("NULL", "", None))
        assert out.isna().all()

    def test_formats_tried_in_order(self):
        rule = parse_dates("date", ["%m/%d/%Y", "%Y-%m-%d"], TOKENS)
        out = rule.apply(_series("2023-03-09", "3/9/2023"))
        assert out.tolist() == [pd.Timestamp(2023, 3, 9)] * 2

    def test_typed_dates_pass_through(self):
        rule = parse_dates("date", ["%m/%d/%Y"], TOKENS)
        out = rule.apply(_series(datetime.date(2023, 3, 9),
                                 pd.Timestamp("2023-03-09 15:30"),
                                 np.datetime64("2023-03-09")))
        assert out.tolist() == [pd.Timestamp(2023, 3, 9)] * 3

    def test_idempotent(self):
        rule = parse_dates("date", ["%m/%d/%Y"], TOKENS)
        once = rule.apply(_series("3/9/2023", "bad", None))
        twice = rule.apply(once.astype(object))
        assert twice.equals(once)


class TestNumericRules:

    def test_count(self):
        out = coerce_count("total_laid_off", TOKENS).apply(
            _series("100", "1,200", 5, "12.0", "NULL", None))
        assert str(out.dtype) == "Int64"
        assert out.tolist()[:4] == [100, 1200, 5, 12]
        assert out.isna().tolist()[4:] == [True, True]

    @pytest.mark.parametrize("bad", ["twelve", "12.5", "-3", "inf", True])
    def test_count_malformed(self, bad):
        out = coerce_count("total_laid_off", TOKENS).apply(_series(bad))
        assert out.isna().all()

    def test_count_beyond_int64_is_absent(self):
        out = coerce_count("total_laid_off", TOKENS).apply(
            _series("99999999999999999999", "9007199254740992"))
        assert str(out.dtype) == "Int64"
        assert out.isna().tolist() == [True, False]
        assert out.iloc[1] == 9007199254740992

    def test_amount_beyond_float_range_is_absent(self):
        out = coerce_amount("funds_raised_millions", TOKENS).apply(_series("1e400", "1e300"))
        assert out.isna().tolist() == [True, False]

    def test_fraction(self):
        out = coerce_fraction("percentage_laid_off", TOKENS).apply(
            _series("0.25", "25%", 1, "0", None))
        assert str(out.dtype) == "Float64"
        assert out.tolist()[:4] == [0.25, 0.25, 1.0, 0.0]
        assert out.isna().iloc[4]

    @pytest.mark.parametrize("bad", ["1.5", "-0.1", "half", "150%"])
    def test_fraction_out_of_range_or_malformed(self, bad):
        out = coerce_fraction("percentage_laid_off", TOKENS).apply(_series(bad))
        assert out.isna().all()

    def test_amount(self):
        out = coerce_amount("funds_raised_millions", TOKENS).apply(
            _series("250", "12.5", "1,000", "-1", "lots", "NULL"))
        assert str(out.dtype) == "Float64"
        assert out.tolist()[:3] == [250.0, 12.5, 1000.0]
        assert out.isna().tolist()[3:] == [True, True, True]


def test_is_absent():
    assert is_absent(None, TOKENS)
    assert is_absent(np.nan, TOKENS)
    assert is_absent(pd.NaT, TOKENS)
    assert is_absent("NULL", TOKENS)
    assert is_absent(" ", TOKENS)
    assert not is_absent("null", TOKENS)
    assert not is_absent(0, TOKENS)


def test_default_rule_order(internal_config):
    rules = build_default_rules(internal_config)
    assert [r.field for r in rules] == [
        "company",
        "industry",
        "country",
        "date",
        "total_laid_off",
        "percentage_laid_off",
        "funds_raised_millions",
    ]
    assert [r.coercion for r in rules] == [False, False, False, True, True, True, True]
