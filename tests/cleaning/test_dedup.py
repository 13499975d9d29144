import pytest

from layoffs.cleaning import eliminate_duplicates, stage_records
from layoffs.contracts import ContractViolation
from layoffs.tables import RANK_FIELD, DedupedTable, StagedTable

pytestmark = pytest.mark.unit


def test_keeps_only_first_of_each_group(make_raw):
    raw = make_raw({}, {}, {"company": "Beta"}, {"company": "Beta"}, {"company": "Gamma"})
    deduped = eliminate_duplicates(stage_records(raw))

    assert isinstance(deduped, DedupedTable)
    assert deduped.frame["company"].tolist() == ["Acme", "Beta", "Gamma"]
    assert (deduped.frame[RANK_FIELD] == 1).all()


def test_two_identical_records_leave_one(make_raw):
    deduped = eliminate_duplicates(stage_records(make_raw({}, {})))
    assert len(deduped) == 1


def test_count_never_increases(make_raw):
    staged = stage_records(make_raw({}, {"company": "Beta"}))
    deduped = eliminate_duplicates(staged)
    assert len(deduped) <= len(staged)


def test_wrong_grouping_is_a_contract_violation(make_raw):
    staged = stage_records(make_raw({}, {}))
    # Simulate a staging bug: both duplicates marked as first occurrence
    broken = staged.frame.copy()
    broken[RANK_FIELD] = 1

    with pytest.raises(ContractViolation, match="count mismatch"):
        eliminate_duplicates(StagedTable(broken))


def test_rejects_unstaged_input(make_raw):
    with pytest.raises(ContractViolation, match="expected StagedTable"):
        eliminate_duplicates(make_raw({}))
