"""Standardization contract.

Enforces the guarantee that after the rule table runs, dates and
layoff magnitudes are typed rather than raw strings.
"""

from pandas.api import types as ptypes

from layoffs.contracts.base import require
from layoffs.tables import BUSINESS_FIELDS, StandardizedTable


def assert_standardized(standardized: StandardizedTable) -> None:
    """Enforce standardization contract.

    Structural checks only: value-level rules (prefix collapsing, country
    fixes) are owned and tested by the rules themselves.

    Raises
    ------
    ContractViolation
        If a typed column is still raw or a value is out of range
    """
    df = standardized.frame
    for col in BUSINESS_FIELDS:
        require(
            col in df.columns,
            f"Standardization contract violated: missing column '{col}'"
        )

    require(
        ptypes.is_datetime64_any_dtype(df["date"]),
        f"Standardization contract violated: 'date' dtype is {df['date'].dtype}, expected datetime64"
    )
    require(
        ptypes.is_integer_dtype(df["total_laid_off"]),
        f"Standardization contract violated: 'total_laid_off' dtype is {df['total_laid_off'].dtype}"
    )
    for col in ("percentage_laid_off", "funds_raised_millions"):
        require(
            ptypes.is_float_dtype(df[col]),
            f"Standardization contract violated: '{col}' dtype is {df[col].dtype}"
        )

    pct = df["percentage_laid_off"].dropna()
    require(
        bool(((pct >= 0) & (pct <= 1)).all()),
        "Standardization contract violated: percentage_laid_off outside [0, 1]"
    )
    for col in ("total_laid_off", "funds_raised_millions"):
        values = df[col].dropna()
        require(
            bool((values >= 0).all()),
            f"Standardization contract violated: negative '{col}'"
        )
