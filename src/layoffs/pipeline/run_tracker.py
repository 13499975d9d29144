"""SQLite-based cleaning run ledger.

Records one row per pipeline run: when it ran, what it read, the record
count at every stage boundary, and how it ended.
"""

import sqlite3
import logging
import uuid
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Dict, List
import threading

logger = logging.getLogger(__name__)


def new_run_id() -> str:
    """Sortable run id: UTC timestamp plus a short random suffix."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    return f"{stamp}_{uuid.uuid4().hex[:8]}"


# Counts copied from PipelineDiagnostics.as_dict(); also the ledger columns.
COUNT_COLUMNS = (
    "raw_count",
    "staged_count",
    "deduplicated_count",
    "standardized_count",
    "reconciled_count",
    "final_count",
    "duplicates_removed",
    "date_coercion_failures",
    "coercion_failures",
    "blanks_normalized",
    "backfilled",
    "dropped_no_signal",
    "late_duplicates_removed",
)


class RunTracker:
    """Tracks cleaning runs and their outcomes.

    **Database Schema:**

    SQLite table ``cleaning_runs``:

    - run_id: Unique run identifier (see ``new_run_id``)
    - source: Input description (file path or ``<records>``)
    - status: running, completed, failed
    - Timestamps: started_at, finished_at (ISO format, UTC)
    - Counts: one column per stage boundary and per stage counter
    - failed_stage, error_message: set when a run fails

    **Typical Usage:**

    Called by the CLI runner around each pipeline run::

        with RunTracker(db_path) as tracker:
            run_id = tracker.start_run(source="data/layoffs.csv")
            result = pipeline.run(raw)
            tracker.complete_run(run_id, result.diagnostics.as_dict())

            stats = tracker.get_statistics()
    """

    def __init__(self, db_path: Path | str):
        """Initialize tracker.

        Parameters
        ----------
        db_path : Path or str
            Path to SQLite database file. Created if doesn't exist.
            Typically: {base_dir}/cleaning_runs.db
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = None
        self._lock = threading.Lock()

        self._init_database()
        logger.info("Run tracker initialized: %s", self.db_path)

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        conn = self._get_connection()
        count_cols = ",\n".join(f"{col} INTEGER" for col in COUNT_COLUMNS)

        with self._lock:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS cleaning_runs (
                    run_id TEXT PRIMARY KEY,
                    source TEXT,
                    status TEXT DEFAULT 'running',

                    started_at TEXT NOT NULL,
                    finished_at TEXT,

                    {count_cols},

                    failed_stage TEXT,
                    error_message TEXT
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_status ON cleaning_runs(status)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_started_at ON cleaning_runs(started_at)")
            conn.commit()

    def start_run(self, source: Optional[str] = None, run_id: Optional[str] = None) -> str:
        """Register a new run with status ``running``.

        Returns
        -------
        str
            The run id (generated unless given).

        Raises
        ------
        ValueError
            If ``run_id`` is already in the ledger.
        """
        run_id = run_id or new_run_id()
        conn = self._get_connection()

        with self._lock:
            cursor = conn.execute("SELECT run_id FROM cleaning_runs WHERE run_id = ?", (run_id,))
            if cursor.fetchone():
                raise ValueError(f"Run already registered: {run_id}")

            conn.execute("""
                INSERT INTO cleaning_runs (run_id, source, status, started_at)
                VALUES (?, ?, 'running', ?)
            """, (run_id, source, datetime.now(timezone.utc).isoformat()))
            conn.commit()

        logger.debug("Registered run: %s", run_id)
        return run_id

    def complete_run(self, run_id: str, counts: Dict[str, int]):
        """Mark a run completed and store its counts.

        Parameters
        ----------
        run_id : str
            Id returned by ``start_run``.
        counts : dict
            Stage counts, typically ``PipelineDiagnostics.as_dict()``.
            Keys that are not ledger columns are ignored.
        """
        self._finish(run_id, "completed", counts)
        logger.debug("Marked run completed: %s", run_id)

    def fail_run(self, run_id: str, stage: Optional[str], error: str,
                 counts: Optional[Dict[str, int]] = None):
        """Mark a run failed, naming the stage and error."""
        self._finish(run_id, "failed", counts or {}, failed_stage=stage, error=error)
        logger.debug("Marked run failed: %s (%s)", run_id, stage)

    def _finish(self, run_id: str, status: str, counts: Dict[str, int],
                failed_stage: Optional[str] = None, error: Optional[str] = None):
        known = {k: int(v) for k, v in counts.items() if k in COUNT_COLUMNS}
        assignments = "".join(f", {col} = ?" for col in known)

        conn = self._get_connection()
        with self._lock:
            cursor = conn.execute(f"""
                UPDATE cleaning_runs
                SET status = ?, finished_at = ?, failed_stage = ?, error_message = ?{assignments}
                WHERE run_id = ?
            """, (
                status,
                datetime.now(timezone.utc).isoformat(),
                failed_stage,
                error,
                *known.values(),
                run_id,
            ))
            conn.commit()

        if cursor.rowcount == 0:
            raise KeyError(f"Unknown run: {run_id}")

    def get_run(self, run_id: str) -> Optional[Dict]:
        """Ledger row for ``run_id`` as a dict, or None if unknown."""
        conn = self._get_connection()

        with self._lock:
            row = conn.execute("SELECT * FROM cleaning_runs WHERE run_id = ?", (run_id,)).fetchone()
            return dict(row) if row else None

    def list_runs(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Dict]:
        """Runs ordered newest first, optionally filtered by status."""
        query = "SELECT * FROM cleaning_runs"
        params = []

        if status:
            query += " WHERE status = ?"
            params.append(status)

        query += " ORDER BY started_at DESC, rowid DESC"

        if limit:
            query += " LIMIT ?"
            params.append(limit)

        conn = self._get_connection()
        with self._lock:
            return [dict(row) for row in conn.execute(query, params).fetchall()]

    def get_statistics(self) -> Dict:
        """Summary over all runs.

        Returns
        -------
        dict
            - `total`, `completed`, `failed`, `running`: run counts
            - `records_in`, `records_out`: raw/final record sums over completed runs
            - `duplicates_removed`: sum over completed runs
        """
        conn = self._get_connection()

        with self._lock:
            row = conn.execute("""
                SELECT
                    COUNT(*) as total,
                    SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END) as completed,
                    SUM(CASE WHEN status = 'failed' THEN 1 ELSE 0 END) as failed,
                    SUM(CASE WHEN status = 'running' THEN 1 ELSE 0 END) as running,
                    SUM(CASE WHEN status = 'completed' THEN raw_count ELSE 0 END) as records_in,
                    SUM(CASE WHEN status = 'completed' THEN final_count ELSE 0 END) as records_out,
                    SUM(CASE WHEN status = 'completed' THEN duplicates_removed ELSE 0 END)
                        as duplicates_removed
                FROM cleaning_runs
            """).fetchone()
            stats = dict(row) if row else {}

        # SUM over zero rows is NULL
        return {k: (v or 0) for k, v in stats.items()}

    def close(self):
        """Close database connection. Safe to call multiple times."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
