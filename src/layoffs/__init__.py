"""`Layoffs` - cleaning pipeline for world layoff event records.

Subpackages:
- io: Raw record loading and clean dataset writing
- cleaning: Staging, duplicate elimination, standardization, reconciliation
- pipeline: Orchestrator and run ledger
- contracts: Stage invariants
- schemas: Layered configuration
"""

__version__ = "0.1.0"
