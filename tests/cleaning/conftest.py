import pytest

from layoffs.cleaning import FieldStandardizer, eliminate_duplicates, stage_records


@pytest.fixture
def standardize(internal_config):
    """Run staging, dedup and standardization; return the StandardizedTable."""
    def _run(raw, config=None):
        standardizer = FieldStandardizer(config or internal_config)
        table, _ = standardizer.standardize(eliminate_duplicates(stage_records(raw)))
        return table
    return _run
