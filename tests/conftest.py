"""Root-level pytest fixtures for the layoffs cleaning test suite.

Provides shared configuration fixtures following Pydantic-based architecture.
All tests must use these fixtures instead of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from layoffs.schemas import ParamConfig, UserConfig, resolve_config
from layoffs.tables import BUSINESS_FIELDS, RawTable


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_reconciler_init(internal_config):
    ...     rec = NullReconciler(internal_config)
    ...     assert rec.backfill_keys == ["company"]
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_strict_backfill(make_config):
    ...     config = make_config(backfill_keys=["company", "location"])
    ...     assert config.reconciler.backfill_keys == ["company", "location"]
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Record Fixtures
# =============================================================================

@pytest.fixture
def make_record():
    """Factory for one raw record; every business field defaults to a valid value."""
    def _make(**overrides):
        record = {
            "company": "Acme",
            "location": "SF Bay Area",
            "industry": "Retail",
            "total_laid_off": "100",
            "percentage_laid_off": "0.1",
            "date": "3/9/2023",
            "stage": "Post-IPO",
            "country": "United States",
            "funds_raised_millions": "250",
        }
        unknown = set(overrides) - set(BUSINESS_FIELDS)
        assert not unknown, f"unknown fields {unknown}"
        record.update(overrides)
        return record
    return _make


@pytest.fixture
def make_raw(make_record):
    """Factory for a RawTable from a list of per-record override dicts."""
    def _make(*overrides):
        return RawTable.from_records([make_record(**o) for o in overrides])
    return _make


@pytest.fixture
def messy_records(make_record):
    """Small dataset exercising every cleaning step at once."""
    return [
        make_record(company="Acme", industry="Retail"),
        make_record(company="Acme", industry="Retail"),                     # exact duplicate
        make_record(company=" Acme", industry="", date="1/5/2023"),          # trim + backfill
        make_record(company="CoinCo", industry="Crypto Currency",
                    country="United States.", date="2/1/2023"),
        make_record(company="Maple", country="Canada", date="not-a-date"),
        make_record(company="Ghost", total_laid_off="NULL", percentage_laid_off=""),
        make_record(company="Halfway", total_laid_off="", percentage_laid_off="0.5"),
        make_record(company="Nobody", industry="NULL", date="4/1/2023"),
    ]


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)
