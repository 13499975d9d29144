"""Reconciliation contract.

Enforces every invariant promised to downstream consumers of the
cleaned dataset.
"""

from layoffs.contracts.base import require
from layoffs.tables import BUSINESS_FIELDS, RANK_FIELD, SIGNAL_FIELDS, TEXT_FIELDS, CleanTable


def assert_clean(clean: CleanTable) -> None:
    """Enforce the final output contract.

    Raises
    ------
    ContractViolation
        If any output invariant is violated
    """
    df = clean.frame
    require(
        RANK_FIELD not in df.columns,
        f"Clean contract violated: transient '{RANK_FIELD}' column still present"
    )
    require(
        list(df.columns) == list(BUSINESS_FIELDS),
        f"Clean contract violated: columns {list(df.columns)} != business fields"
    )
    if len(df) == 0:
        return

    for col in TEXT_FIELDS:
        blanks = int((df[col] == "").sum())
        require(
            blanks == 0,
            f"Clean contract violated: {blanks} empty strings in '{col}'"
        )

    signal = df[list(SIGNAL_FIELDS)].notna().any(axis=1)
    require(
        bool(signal.all()),
        f"Clean contract violated: {int((~signal).sum())} records lack both "
        f"total_laid_off and percentage_laid_off"
    )

    duplicates = int(df.duplicated(subset=list(BUSINESS_FIELDS)).sum())
    require(
        duplicates == 0,
        f"Clean contract violated: {duplicates} duplicate records in output"
    )
