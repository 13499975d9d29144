"""Cleaning stages: staging, duplicate elimination, standardization, reconciliation."""

from layoffs.cleaning.staging import stage_records
from layoffs.cleaning.dedup import eliminate_duplicates
from layoffs.cleaning.rules import FieldRule, build_default_rules
from layoffs.cleaning.standardizer import FieldStandardizer, StandardizationReport
from layoffs.cleaning.reconciler import NullReconciler, ReconciliationReport

__all__ = [
    "stage_records",
    "eliminate_duplicates",
    "FieldRule",
    "build_default_rules",
    "FieldStandardizer",
    "StandardizationReport",
    "NullReconciler",
    "ReconciliationReport",
]
