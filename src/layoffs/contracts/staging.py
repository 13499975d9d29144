"""Staging contract.

Enforces the guarantee that staging preserved every raw record and
attached a well-formed duplicate rank.
"""

from layoffs.contracts.base import require
from layoffs.tables import BUSINESS_FIELDS, RANK_FIELD, StagedTable


def assert_staged(staged: StagedTable, raw_count: int) -> None:
    """Enforce staging contract.

    Parameters
    ----------
    staged : StagedTable
        Output of ``stage_records``
    raw_count : int
        Number of raw records handed to staging

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    df = staged.frame
    require(
        RANK_FIELD in df.columns,
        f"Staging contract violated: missing '{RANK_FIELD}' column"
    )
    require(
        len(df) == raw_count,
        f"Staging contract violated: {len(df)} staged records, expected {raw_count}"
    )
    if len(df) == 0:
        return

    ranks = df[RANK_FIELD]
    require(
        (ranks >= 1).all(),
        f"Staging contract violated: '{RANK_FIELD}' must be >= 1"
    )

    # Each duplicate group owns exactly one rank-1 record
    groups = len(df.drop_duplicates(subset=list(BUSINESS_FIELDS)))
    survivors = int((ranks == 1).sum())
    require(
        survivors == groups,
        f"Staging contract violated: {survivors} rank-1 records for {groups} duplicate groups"
    )
