"""End-to-end tests for the cleaning pipeline."""

import datetime
import logging

import pandas as pd
import pytest

from layoffs.cleaning.rules import FieldRule
from layoffs.contracts import ContractViolation
from layoffs.pipeline import CleaningPipeline, PipelineResult
from layoffs.tables import BUSINESS_FIELDS, DedupedTable, RawTable

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


def _by_company(result: PipelineResult) -> dict:
    return {r["company"]: r for r in result.clean.to_records()}


class TestScenarios:
    """The six reference scenarios."""

    def test_identical_records_collapse_to_one(self, pipeline, make_record):
        result = pipeline.run([make_record(), make_record()])
        assert len(result.clean) == 1
        assert result.diagnostics.duplicates_removed == 1

    def test_crypto_industry_collapsed(self, pipeline, make_record):
        result = pipeline.run([make_record(industry="Crypto1234")])
        assert result.clean.to_records()[0]["industry"] == "Crypto"

    def test_country_trailing_period(self, pipeline, make_record):
        result = pipeline.run([
            make_record(company="A", country="United States."),
            make_record(company="B", country="Canada"),
        ])
        records = _by_company(result)
        assert records["A"]["country"] == "United States"
        assert records["B"]["country"] == "Canada"

    def test_dates(self, pipeline, make_record):
        result = pipeline.run([
            make_record(company="A", date="3/9/2023"),
            make_record(company="B", date="not-a-date"),
        ])
        records = _by_company(result)
        assert records["A"]["date"] == datetime.date(2023, 3, 9)
        assert records["B"]["date"] is None
        assert result.diagnostics.date_coercion_failures == 1

    def test_industry_backfill(self, pipeline, make_record):
        result = pipeline.run([
            make_record(company="Acme", industry="", date="1/1/2023"),
            make_record(company="Acme", industry="Retail"),
        ])
        assert [r["industry"] for r in result.clean.to_records()] == ["Retail", "Retail"]
        assert result.diagnostics.backfilled == 1

    def test_signal_filter(self, pipeline, make_record):
        result = pipeline.run([
            make_record(company="Gone", total_laid_off=None, percentage_laid_off=None),
            make_record(company="Kept", total_laid_off=None, percentage_laid_off="0.2"),
        ])
        assert list(_by_company(result)) == ["Kept"]
        assert result.diagnostics.dropped_no_signal == 1


class TestProperties:
    """Whole-pipeline guarantees."""

    def test_idempotent(self, pipeline, messy_records):
        first = pipeline.run(messy_records)
        second = pipeline.run(first.clean.frame)

        pd.testing.assert_frame_equal(first.clean.frame, second.clean.frame)
        assert second.diagnostics.duplicates_removed == 0
        assert second.diagnostics.backfilled == 0

    def test_counts_never_increase(self, pipeline, messy_records):
        d = pipeline.run(messy_records).diagnostics
        counts = [d.raw_count, d.staged_count, d.deduplicated_count,
                  d.standardized_count, d.reconciled_count, d.final_count]
        assert counts == sorted(counts, reverse=True)
        assert d.raw_count == d.staged_count

    def test_messy_dataset_diagnostics(self, pipeline, messy_records):
        d = pipeline.run(messy_records).diagnostics
        assert d.as_dict() == {
            "raw_count": 8,
            "staged_count": 8,
            "deduplicated_count": 7,
            "standardized_count": 7,
            "reconciled_count": 6,
            "final_count": 6,
            "duplicates_removed": 1,
            "date_coercion_failures": 1,
            "coercion_failures": 1,
            "blanks_normalized": 2,
            "backfilled": 1,
            "dropped_no_signal": 1,
            "late_duplicates_removed": 0,
        }

    def test_output_invariants(self, pipeline, messy_records):
        df = pipeline.run(messy_records).clean.frame

        assert list(df.columns) == list(BUSINESS_FIELDS)
        assert not df.duplicated().any()
        assert df[["total_laid_off", "percentage_laid_off"]].notna().any(axis=1).all()
        for col in ("company", "location", "industry", "stage", "country"):
            assert not (df[col] == "").any()
        assert df["date"].dtype == "datetime64[ns]"

    def test_absence_is_none_in_records(self, pipeline, messy_records):
        records = pipeline.run(messy_records).clean.to_records()
        halfway = next(r for r in records if r["company"] == "Halfway")
        assert halfway["total_laid_off"] is None
        assert halfway["percentage_laid_off"] == 0.5

    def test_raw_input_untouched(self, pipeline, messy_records):
        raw = RawTable.from_records(messy_records)
        before = raw.frame.copy()
        pipeline.run(raw)
        assert raw.frame.equals(before)


class TestInputs:

    def test_oversized_count_recovered_to_absent(self, pipeline, make_record):
        result = pipeline.run([make_record(total_laid_off="99999999999999999999")])

        assert result.clean.to_records()[0]["total_laid_off"] is None
        assert result.diagnostics.coercion_failures == {"total_laid_off": 1}
        assert result.diagnostics.final_count == 1

    def test_empty_input(self, pipeline):
        result = pipeline.run([])
        assert len(result.clean) == 0
        assert list(result.clean.frame.columns) == list(BUSINESS_FIELDS)
        assert result.diagnostics.final_count == 0

    def test_dataframe_input(self, pipeline, make_record):
        df = pd.DataFrame([make_record()])
        df["extra"] = "ignored"
        result = pipeline.run(df)
        assert list(result.clean.frame.columns) == list(BUSINESS_FIELDS)

    def test_dataframe_missing_column_rejected(self, pipeline):
        with pytest.raises(ValueError, match="missing business fields"):
            pipeline.run(pd.DataFrame({"company": ["Acme"]}))

    def test_default_config(self, make_record):
        result = CleaningPipeline().run([make_record()])
        assert len(result.clean) == 1


class TestFailures:

    def test_broken_rule_aborts_with_checkpoint(self, internal_config, make_record):
        # A rule that leaves dates as raw text breaks the standardization contract
        identity = FieldRule("company", "identity", lambda s: s)
        pipeline = CleaningPipeline(internal_config, rules=[identity])

        with pytest.raises(ContractViolation, match="'date' dtype"):
            pipeline.run([make_record()])

        assert pipeline.failed_stage == "standardization"
        assert isinstance(pipeline.checkpoint, DedupedTable)

    def test_contract_violation_logged_critical(self, internal_config, make_record, caplog):
        pipeline = CleaningPipeline(internal_config, rules=[])
        with caplog.at_level(logging.CRITICAL):
            with pytest.raises(ContractViolation):
                pipeline.run([make_record()])
        assert "violated at standardization stage" in caplog.text

    def test_successful_run_clears_failure(self, internal_config, make_record):
        pipeline = CleaningPipeline(internal_config)
        pipeline.failed_stage = "staging"
        pipeline.run([make_record()])
        assert pipeline.failed_stage is None


def test_setup_logging_writes_run_log(pipeline, temp_dir):
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        log_path = pipeline.setup_logging(temp_dir / "logs", run_id="abc")
        logging.getLogger("layoffs.test").info("hello")
        for handler in root.handlers:
            handler.flush()

        assert log_path == temp_dir / "logs" / "cleaning_abc.log"
        assert "layoffs.test - INFO - hello" in log_path.read_text()
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in saved[0]:
            root.addHandler(handler)
        root.setLevel(saved[1])
