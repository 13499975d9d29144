"""Pipeline contracts: fail-fast enforcement of stage invariants.

This package enforces semantic guarantees between pipeline stages.
Contracts fail immediately and loudly when pipeline stages don't produce
their promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- Cleaning rules handle messy data values
"""

from layoffs.contracts.failure import ContractViolation
from layoffs.contracts.base import require, require_stage_input
from layoffs.contracts.staging import assert_staged
from layoffs.contracts.dedup import assert_deduplicated
from layoffs.contracts.standardize import assert_standardized
from layoffs.contracts.reconcile import assert_clean

__all__ = [
    "ContractViolation",
    "require",
    "require_stage_input",
    "assert_staged",
    "assert_deduplicated",
    "assert_standardized",
    "assert_clean",
]
