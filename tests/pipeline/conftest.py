import pytest

from layoffs.pipeline import CleaningPipeline, RunTracker


@pytest.fixture
def tracker(temp_dir):
    db_path = temp_dir / "cleaning_runs.db"
    with RunTracker(db_path) as t:
        yield t


@pytest.fixture
def pipeline(internal_config):
    return CleaningPipeline(internal_config)
