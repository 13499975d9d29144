"""Field standardization stage.

Applies an ordered, open table of field-scoped rules (see
:mod:`layoffs.cleaning.rules`) to deduplicated records.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, TYPE_CHECKING

from layoffs.cleaning.rules import FieldRule, build_default_rules, is_absent
from layoffs.contracts import require_stage_input
from layoffs.tables import BUSINESS_FIELDS, DedupedTable, StandardizedTable

if TYPE_CHECKING:
    from layoffs.schemas import InternalConfig

__all__ = ['FieldStandardizer', 'StandardizationReport']

logger = logging.getLogger(__name__)


@dataclass
class StandardizationReport:
    """What the rule table changed.

    ``coercion_failures`` maps field name to the number of present values
    that could not be coerced and were set to absent. ``values_changed``
    maps ``field:rule`` to the number of values a text rule rewrote.
    """
    coercion_failures: dict = field(default_factory=dict)
    values_changed: dict = field(default_factory=dict)

    @property
    def date_coercion_failures(self) -> int:
        return self.coercion_failures.get("date", 0)

    @property
    def total_coercion_failures(self) -> int:
        return sum(self.coercion_failures.values())


class FieldStandardizer:
    """Config-driven field standardization.

    The rule table is open: extra rules can be registered without touching
    the existing ones, and run after them in registration order::

        standardizer = FieldStandardizer(config)
        standardizer.register(collapse_prefix("industry", "Fin", "Finance"))
        table, report = standardizer.standardize(deduped)
    """

    def __init__(self, config: "InternalConfig", rules: Optional[Iterable[FieldRule]] = None):
        """Store config and build the rule table.

        Parameters
        ----------
        config : InternalConfig
            Runtime configuration (standardizer section and null tokens).
        rules : iterable of FieldRule, optional
            Replaces the default rule table when given.
        """
        self.config = config
        self.null_tokens = list(config.global_.null_tokens)
        self.rules = []
        for rule in (build_default_rules(config) if rules is None else rules):
            self.register(rule)

        logger.debug("FieldStandardizer initialized with %d rules", len(self.rules))

    def register(self, rule: FieldRule) -> None:
        """Append a rule to the table.

        Raises
        ------
        ValueError
            If the rule targets a field that is not a business field.
        """
        if rule.field not in BUSINESS_FIELDS:
            raise ValueError(f"Rule '{rule.name}' targets unknown field '{rule.field}'")
        self.rules.append(rule)

    def standardize(self, deduped: DedupedTable) -> tuple[StandardizedTable, StandardizationReport]:
        """Apply every rule, in order, to a copy of ``deduped``."""
        require_stage_input(deduped, DedupedTable, "Standardization")

        df = deduped.frame.copy()
        report = StandardizationReport()

        for rule in self.rules:
            before = df[rule.field]
            after = rule.apply(before)

            if rule.coercion:
                present = ~before.map(lambda v: is_absent(v, self.null_tokens)).astype(bool)
                failed = int((present & after.isna()).sum())
                if failed:
                    report.coercion_failures[rule.field] = (
                        report.coercion_failures.get(rule.field, 0) + failed
                    )
            else:
                changed = int(((before != after) & before.notna()).sum())
                if changed:
                    report.values_changed[f"{rule.field}:{rule.name}"] = changed
                    logger.debug("Rule %s:%s rewrote %d values", rule.field, rule.name, changed)

            df[rule.field] = after

        for field_name, count in report.coercion_failures.items():
            logger.warning("Coercion failures in '%s': %d values set to absent", field_name, count)

        logger.info("Standardized %d records (%d rules, %d coercion failures)",
                    len(df), len(self.rules), report.total_coercion_failures)
        return StandardizedTable(df), report
