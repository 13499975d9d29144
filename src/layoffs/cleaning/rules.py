"""Field normalization rules.

A rule is scoped to one field and maps that field's column to a new
column. Every rule is total (defined for every value, absent included)
and idempotent (applying it twice equals applying it once).

Rules flagged as ``coercion`` turn raw text into typed values. When such a
rule turns a present value into an absent one, the standardizer counts a
coercion failure instead of raising.
"""

import datetime
import math
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import numpy as np
import pandas as pd

__all__ = [
    'FieldRule',
    'build_default_rules',
    'is_absent',
    'strip_whitespace',
    'collapse_prefix',
    'strip_trailing_periods',
    'parse_dates',
    'coerce_count',
    'coerce_fraction',
    'coerce_amount',
]


@dataclass(frozen=True)
class FieldRule:
    """One entry of the standardization rule table."""
    field: str
    name: str
    transform: Callable[[pd.Series], pd.Series]
    coercion: bool = False

    def apply(self, series: pd.Series) -> pd.Series:
        return self.transform(series)


def is_absent(value, null_tokens: Iterable[str]) -> bool:
    """True for missing values and for any configured null token."""
    if isinstance(value, str):
        return value.strip() in {t.strip() for t in null_tokens}
    return value is None or bool(pd.isna(value))


def _map_values(series: pd.Series, fn, dtype) -> pd.Series:
    return pd.Series([fn(v) for v in series], index=series.index, dtype=dtype)


# =============================================================================
# Text rules
# =============================================================================

def strip_whitespace(field: str) -> FieldRule:
    def _strip(series):
        return _map_values(series, lambda v: v.strip() if isinstance(v, str) else v, object)
    return FieldRule(field, "strip_whitespace", _strip)


def collapse_prefix(field: str, prefix: str, canonical: str) -> FieldRule:
    """Rewrite every value starting with ``prefix`` to exactly ``canonical``.

    'Crypto1234' and 'Crypto Currency' both become 'Crypto'.
    """
    def _collapse(series):
        return _map_values(
            series,
            lambda v: canonical if isinstance(v, str) and v.startswith(prefix) else v,
            object,
        )
    return FieldRule(field, f"collapse_prefix[{prefix}]", _collapse)


def strip_trailing_periods(field: str, names: Iterable[str]) -> FieldRule:
    """Remove trailing '.' characters from the listed names only.

    'United States.' and 'United States..' become 'United States';
    any value not in ``names`` is untouched.
    """
    names = list(names)
    pattern = re.compile(r"(%s)\.+" % "|".join(re.escape(n) for n in names)) if names else None

    def _strip(series):
        def fix(v):
            if pattern is None or not isinstance(v, str):
                return v
            match = pattern.fullmatch(v)
            return match.group(1) if match else v
        return _map_values(series, fix, object)
    return FieldRule(field, "strip_trailing_periods", _strip)


# =============================================================================
# Coercion rules
# =============================================================================

def _to_number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _parse_date(value, formats) -> Optional[pd.Timestamp]:
    if isinstance(value, (datetime.date, np.datetime64)):
        ts = pd.Timestamp(value).normalize()
    elif isinstance(value, str):
        ts = None
        text = value.strip()
        for fmt in formats:
            try:
                ts = pd.Timestamp(datetime.datetime.strptime(text, fmt))
                break
            except ValueError:
                continue
        if ts is None:
            return None
    else:
        return None

    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    if not (pd.Timestamp.min <= ts <= pd.Timestamp.max):
        return None
    return ts


def parse_dates(field: str, formats: Iterable[str], null_tokens: Iterable[str]) -> FieldRule:
    """Coerce display strings to typed dates, trying each format in order.

    Typed dates pass through (normalized to midnight). Unparseable strings,
    impossible calendar dates (2/30/2023) and null tokens become NaT.
    """
    formats = list(formats)
    tokens = list(null_tokens)

    def _parse(series):
        def parse(v):
            if is_absent(v, tokens):
                return None
            return _parse_date(v, formats)
        return _map_values(series, parse, "datetime64[ns]")
    return FieldRule(field, "parse_dates", _parse, coercion=True)


_MAX_COUNT = np.iinfo(np.int64).max


def coerce_count(field: str, null_tokens: Iterable[str]) -> FieldRule:
    """Non-negative whole numbers ('1,200' is 1200; '12.5' and '-3' are malformed).

    Values beyond the int64 range are malformed too.
    """
    tokens = list(null_tokens)

    def _coerce(series):
        def parse(v):
            if is_absent(v, tokens):
                return None
            number = _to_number(v)
            if number is None or number < 0 or not number.is_integer():
                return None
            count = int(number)
            if count > _MAX_COUNT:
                return None
            return count
        return _map_values(series, parse, "Int64")
    return FieldRule(field, "coerce_count", _coerce, coercion=True)


def coerce_fraction(field: str, null_tokens: Iterable[str]) -> FieldRule:
    """Fractions in [0, 1]; '25%' is read as 0.25."""
    tokens = list(null_tokens)

    def _coerce(series):
        def parse(v):
            if is_absent(v, tokens):
                return None
            if isinstance(v, str) and v.strip().endswith("%"):
                number = _to_number(v.strip()[:-1])
                number = None if number is None else number / 100.0
            else:
                number = _to_number(v)
            if number is None or not 0.0 <= number <= 1.0:
                return None
            return number
        return _map_values(series, parse, "Float64")
    return FieldRule(field, "coerce_fraction", _coerce, coercion=True)


def coerce_amount(field: str, null_tokens: Iterable[str]) -> FieldRule:
    """Non-negative amounts, whole or decimal."""
    tokens = list(null_tokens)

    def _coerce(series):
        def parse(v):
            if is_absent(v, tokens):
                return None
            number = _to_number(v)
            if number is None or number < 0:
                return None
            return number
        return _map_values(series, parse, "Float64")
    return FieldRule(field, "coerce_amount", _coerce, coercion=True)


# =============================================================================
# Default rule table
# =============================================================================

def build_default_rules(config) -> list[FieldRule]:
    """Rule table from runtime config, in application order.

    Parameters
    ----------
    config : InternalConfig
        Uses ``standardizer`` and ``global_.null_tokens``.
    """
    std = config.standardizer
    tokens = config.global_.null_tokens

    rules = [strip_whitespace(field) for field in std.strip_fields]
    rules += [
        collapse_prefix("industry", prefix, canonical)
        for prefix, canonical in std.industry_prefixes.items()
    ]
    rules.append(strip_trailing_periods("country", std.country_trailing_periods))
    rules.append(parse_dates("date", std.date_formats, tokens))
    rules.append(coerce_count("total_laid_off", tokens))
    rules.append(coerce_fraction("percentage_laid_off", tokens))
    rules.append(coerce_amount("funds_raised_millions", tokens))
    return rules
