"""Pipeline orchestration and run ledger."""

from layoffs.pipeline.orchestrator import CleaningPipeline, PipelineDiagnostics, PipelineResult
from layoffs.pipeline.run_tracker import RunTracker, new_run_id

__all__ = [
    "CleaningPipeline",
    "PipelineDiagnostics",
    "PipelineResult",
    "RunTracker",
    "new_run_id",
]
