"""Null/blank reconciliation stage.

Four steps, always in this order:

1. Blank normalization: null tokens in text fields become absent.
2. Industry backfill: an absent industry is copied from another record
   sharing the backfill key (``company`` by default).
3. Signal filter: records with neither ``total_laid_off`` nor
   ``percentage_laid_off`` are dropped.
4. Schema finalization: ``row_num`` is dropped and records that became
   identical during standardization or backfill are collapsed.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from layoffs.cleaning.rules import is_absent
from layoffs.contracts import require_stage_input
from layoffs.tables import (
    BUSINESS_FIELDS,
    RANK_FIELD,
    SIGNAL_FIELDS,
    TEXT_FIELDS,
    CleanTable,
    StandardizedTable,
)

if TYPE_CHECKING:
    from layoffs.schemas import InternalConfig

__all__ = ['NullReconciler', 'ReconciliationReport']

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """Counts for each reconciliation step."""
    blanks_normalized: int = 0
    backfilled: int = 0
    dropped_no_signal: int = 0
    reconciled_count: int = 0
    late_duplicates_removed: int = 0


class NullReconciler:
    """Unify blank-vs-null, backfill industry, drop signal-less records.

    Backfill matches on ``company`` only unless the config asks for
    ``company + location``. Several locations of one company can have
    different true industries, so the stricter key trades recall for
    precision; it is opt-in and logged when active.

    When several siblings carry different industries, the first one in
    source order wins. Callers must not depend on which.
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.null_tokens = list(config.global_.null_tokens)
        self.backfill_keys = list(config.reconciler.backfill_keys)

        if self.backfill_keys != ["company"]:
            logger.info("Industry backfill key: %s (stricter than company-only)",
                        " + ".join(self.backfill_keys))

    def reconcile(self, standardized: StandardizedTable) -> tuple[CleanTable, ReconciliationReport]:
        """Run all four steps on a copy of ``standardized``."""
        require_stage_input(standardized, StandardizedTable, "Reconciliation")

        df = standardized.frame.copy()
        report = ReconciliationReport()

        df, report.blanks_normalized = self.normalize_blanks(df)
        df, report.backfilled = self.backfill_industry(df)
        df, report.dropped_no_signal = self.drop_signal_less(df)
        report.reconciled_count = len(df)
        df, report.late_duplicates_removed = self.finalize(df)

        logger.info(
            "Reconciled: %d blanks -> absent, %d industries backfilled, "
            "%d signal-less dropped, %d records out",
            report.blanks_normalized, report.backfilled, report.dropped_no_signal, len(df)
        )
        return CleanTable(df), report

    def normalize_blanks(self, df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
        """Rewrite null tokens in every text field to ``None``.

        Tokens match after stripping whitespace, so "  " and " NULL " are
        blanks too.
        """
        total = 0
        for col in TEXT_FIELDS:
            blank = df[col].map(lambda v: isinstance(v, str) and is_absent(v, self.null_tokens))
            mask = blank.astype(bool)
            count = int(mask.sum())
            if count:
                df.loc[mask, col] = None
                logger.debug("Blank normalization: %d values in '%s'", count, col)
                total += count
        return df, total

    def backfill_industry(self, df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
        """Fill absent industry from a sibling sharing the backfill key.

        One pass builds ``key -> first present industry``; a second pass
        fills from it. Values filled here are never used as donors, so
        this is not a transitive closure.
        """
        keys = self.backfill_keys
        has_key = df[keys].notna().all(axis=1)
        has_industry = df["industry"].notna()

        donors = df.loc[has_key & has_industry]
        lookup = {}
        for key, industry in zip(donors[keys].itertuples(index=False, name=None), donors["industry"]):
            lookup.setdefault(key, industry)

        targets = df.loc[has_key & ~has_industry, keys]
        filled = 0
        for idx, key in zip(targets.index, targets.itertuples(index=False, name=None)):
            industry = lookup.get(key)
            if industry is not None:
                df.at[idx, "industry"] = industry
                filled += 1

        unresolved = len(targets) - filled
        if unresolved:
            logger.debug("Backfill: %d records left without industry (no sibling)", unresolved)
        return df, filled

    def drop_signal_less(self, df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
        """Drop records where both layoff-magnitude fields are absent."""
        keep = df[list(SIGNAL_FIELDS)].notna().any(axis=1)
        return df.loc[keep], int((~keep).sum())

    def finalize(self, df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
        """Drop ``row_num`` and collapse records made identical by cleaning."""
        df = df.drop(columns=[RANK_FIELD])
        duplicated = df.duplicated(subset=list(BUSINESS_FIELDS))
        removed = int(duplicated.sum())
        if removed:
            logger.warning("Collapsed %d records that became identical after standardization/backfill",
                           removed)
        df = df.loc[~duplicated, list(BUSINESS_FIELDS)].reset_index(drop=True)
        return df, removed
