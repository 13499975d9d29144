"""Sequential cleaning pipeline orchestration.

Runs the four cleaning stages in their fixed order, enforces every stage
contract, keeps the last good table as a checkpoint and collects the stage
counts into a single diagnostics object.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

import pandas as pd

from layoffs.cleaning import (
    FieldRule,
    FieldStandardizer,
    NullReconciler,
    eliminate_duplicates,
    stage_records,
)
from layoffs.contracts import (
    ContractViolation,
    assert_clean,
    assert_staged,
    assert_standardized,
)
from layoffs.schemas import InternalConfig, resolve_config
from layoffs.tables import CleanTable, RawTable

__all__ = ['CleaningPipeline', 'PipelineDiagnostics', 'PipelineResult']

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


@dataclass
class PipelineDiagnostics:
    """Record counts at every stage boundary plus per-stage counters."""
    raw_count: int = 0
    staged_count: int = 0
    deduplicated_count: int = 0
    standardized_count: int = 0
    reconciled_count: int = 0
    final_count: int = 0
    duplicates_removed: int = 0
    coercion_failures: dict = field(default_factory=dict)
    blanks_normalized: int = 0
    backfilled: int = 0
    dropped_no_signal: int = 0
    late_duplicates_removed: int = 0

    @property
    def date_coercion_failures(self) -> int:
        return self.coercion_failures.get("date", 0)

    def as_dict(self) -> dict:
        """Flat dict of counts, as stored in the run ledger."""
        return {
            "raw_count": self.raw_count,
            "staged_count": self.staged_count,
            "deduplicated_count": self.deduplicated_count,
            "standardized_count": self.standardized_count,
            "reconciled_count": self.reconciled_count,
            "final_count": self.final_count,
            "duplicates_removed": self.duplicates_removed,
            "date_coercion_failures": self.date_coercion_failures,
            "coercion_failures": sum(self.coercion_failures.values()),
            "blanks_normalized": self.blanks_normalized,
            "backfilled": self.backfilled,
            "dropped_no_signal": self.dropped_no_signal,
            "late_duplicates_removed": self.late_duplicates_removed,
        }


@dataclass
class PipelineResult:
    """Clean table plus the diagnostics of the run that produced it."""
    clean: CleanTable
    diagnostics: PipelineDiagnostics


RawInput = Union[RawTable, pd.DataFrame, Iterable[Mapping]]


class CleaningPipeline:
    """Runs staging, deduplication, standardization and reconciliation.

    Stages run sequentially on whole-table copies. If a stage breaks its
    contract the run is aborted with ``ContractViolation``; ``checkpoint``
    then holds the table produced by the last stage that completed and
    ``failed_stage`` names the stage that did not.

    Example usage::

        from layoffs.pipeline import CleaningPipeline

        pipeline = CleaningPipeline(config)
        result = pipeline.run(records)
        result.clean.to_records()
        result.diagnostics.duplicates_removed
    """

    STAGES = ("staging", "deduplication", "standardization", "reconciliation")

    def __init__(self, config: Optional[InternalConfig] = None,
                 rules: Optional[Iterable[FieldRule]] = None):
        """Build stage components from config.

        Parameters
        ----------
        config : InternalConfig, optional
            Resolved runtime config. Expert defaults are used when omitted.
        rules : iterable of FieldRule, optional
            Replaces the default standardization rule table.
        """
        self.config = config if config is not None else resolve_config()
        self.standardizer = FieldStandardizer(self.config, rules=rules)
        self.reconciler = NullReconciler(self.config)

        self.checkpoint = None
        self.failed_stage = None

    def setup_logging(self, log_dir: Optional[Path | str] = None,
                      run_id: Optional[str] = None) -> Optional[Path]:
        """Configure root logger with console and optional file handlers.

        Existing root handlers are replaced. Returns the log file path when
        ``log_dir`` is given.
        """
        log_level = getattr(logging, self.config.logging.level, logging.INFO)

        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()

        log_path = None
        if log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / f"cleaning_{run_id or 'pipeline'}.log"

            fh = logging.FileHandler(log_path)
            fh.setLevel(log_level)
            fh.setFormatter(formatter)
            root.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)
        return log_path

    def run(self, raw: RawInput) -> PipelineResult:
        """Clean ``raw`` and return the clean table with diagnostics.

        Parameters
        ----------
        raw : RawTable, DataFrame or iterable of mappings
            Raw records. Frames must hold every business field.

        Raises
        ------
        ContractViolation
            If any stage breaks its contract. The run is aborted.
        ValueError
            If a raw frame lacks a business field.
        """
        raw = self._as_raw_table(raw)
        diagnostics = PipelineDiagnostics(raw_count=len(raw))
        self.checkpoint = raw
        self.failed_stage = None

        logger.info("=" * 60)
        logger.info("Starting cleaning pipeline: %d raw records", len(raw))
        logger.info("=" * 60)

        stage = self.STAGES[0]
        try:
            staged = stage_records(raw)
            assert_staged(staged, len(raw))
            diagnostics.staged_count = len(staged)
            self.checkpoint = staged

            stage = self.STAGES[1]
            deduped = eliminate_duplicates(staged)
            diagnostics.deduplicated_count = len(deduped)
            diagnostics.duplicates_removed = len(staged) - len(deduped)
            self.checkpoint = deduped

            stage = self.STAGES[2]
            standardized, std_report = self.standardizer.standardize(deduped)
            assert_standardized(standardized)
            diagnostics.standardized_count = len(standardized)
            diagnostics.coercion_failures = dict(std_report.coercion_failures)
            self.checkpoint = standardized

            stage = self.STAGES[3]
            clean, rec_report = self.reconciler.reconcile(standardized)
            assert_clean(clean)
            diagnostics.blanks_normalized = rec_report.blanks_normalized
            diagnostics.backfilled = rec_report.backfilled
            diagnostics.dropped_no_signal = rec_report.dropped_no_signal
            diagnostics.reconciled_count = rec_report.reconciled_count
            diagnostics.late_duplicates_removed = rec_report.late_duplicates_removed
            diagnostics.final_count = len(clean)
            self.checkpoint = clean

        except ContractViolation as e:
            self.failed_stage = stage
            logger.critical("CRITICAL: Pipeline contract violated at %s stage: %s", stage, e)
            logger.critical("Run aborted; checkpoint holds the last completed stage (%s)",
                            type(self.checkpoint).__name__)
            raise

        self._log_summary(diagnostics)
        return PipelineResult(clean=clean, diagnostics=diagnostics)

    @staticmethod
    def _as_raw_table(raw: RawInput) -> RawTable:
        if isinstance(raw, RawTable):
            return raw
        if isinstance(raw, pd.DataFrame):
            return RawTable.from_frame(raw)
        return RawTable.from_records(raw)

    @staticmethod
    def _log_summary(diagnostics: PipelineDiagnostics):
        logger.info("Record counts: raw=%d staged=%d deduplicated=%d standardized=%d "
                    "reconciled=%d final=%d",
                    diagnostics.raw_count, diagnostics.staged_count,
                    diagnostics.deduplicated_count, diagnostics.standardized_count,
                    diagnostics.reconciled_count, diagnostics.final_count)
        if diagnostics.date_coercion_failures:
            logger.warning("Date coercion failures: %d", diagnostics.date_coercion_failures)
        logger.info("✓ Cleaning pipeline complete")
