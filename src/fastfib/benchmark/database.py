"""SQLite storage for benchmark sessions.

A session is one run of a suite: every (group, algorithm, n) case with its
timing summary and correctness verdict, plus the library versions it ran
against.
"""

from __future__ import annotations

import logging
import sqlite3
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from fastfib.benchmark.stats import BenchmarkStats

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS sessions (
    id INTEGER PRIMARY KEY,
    timestamp TEXT NOT NULL,
    description TEXT,
    git_commit TEXT
);
CREATE TABLE IF NOT EXISTS results (
    id INTEGER PRIMARY KEY,
    session_id INTEGER NOT NULL,
    group_name TEXT NOT NULL,
    algorithm TEXT NOT NULL,
    n TEXT NOT NULL,
    mean_ms REAL,
    median_ms REAL,
    stddev_ms REAL,
    cv REAL,
    min_ms REAL,
    max_ms REAL,
    runs INTEGER,
    outliers_removed INTEGER,
    checksum TEXT,
    correct INTEGER NOT NULL,
    error TEXT,
    FOREIGN KEY (session_id) REFERENCES sessions(id)
);
CREATE TABLE IF NOT EXISTS environment (
    id INTEGER PRIMARY KEY,
    session_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    version TEXT,
    FOREIGN KEY (session_id) REFERENCES sessions(id)
);
"""


@dataclass(frozen=True)
class BenchmarkResult:
    """Outcome of one benchmark case.

    Attributes:
        group: Suite group the case belongs to.
        algorithm: Registered algorithm name.
        n: Fibonacci index.
        stats: Timing summary.
        checksum: Last ten decimal digits of the computed value.
        correct: Whether the value matched the reference algorithm.
        error: Exception text when the algorithm failed.
    """

    group: str
    algorithm: str
    n: int
    stats: BenchmarkStats
    checksum: int | None
    correct: bool
    error: str | None = None


@dataclass
class Session:
    """A set of benchmark results recorded together.

    Attributes:
        timestamp: When the run started.
        description: Free-form label.
        git_commit: Commit of the working tree, if known.
        results: Case results in execution order.
        environment: Component name to version string.
        id: Database ID, None until saved.
    """

    timestamp: datetime
    description: str | None
    git_commit: str | None
    results: list[BenchmarkResult]
    environment: dict[str, str] = field(default_factory=dict)
    id: int | None = None


def current_git_commit() -> str | None:
    """Return the short hash of HEAD, or None outside a git checkout."""
    try:
        proc = subprocess.run(
            ["git", "rev-parse", "--short=12", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, OSError):
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def _ms(seconds: float) -> float:
    return seconds * 1000


class BenchmarkDatabase:
    """SQLite database of benchmark sessions.

    Use as a context manager, or call ``open`` and ``close`` explicitly.
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self.conn: sqlite3.Connection | None = None

    def __enter__(self) -> BenchmarkDatabase:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        """Connect and create the tables if needed."""
        self.conn = sqlite3.connect(self.db_path)
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None

    def _connection(self) -> sqlite3.Connection:
        if not self.conn:
            msg = "Database not open"
            raise RuntimeError(msg)
        return self.conn

    def save_session(self, session: Session) -> int:
        """Store a session and its results.

        Args:
            session: Session to store. Its git commit is filled in from the
                working tree when missing.

        Returns:
            The new session ID, also assigned to ``session.id``.
        """
        conn = self._connection()
        git_commit = session.git_commit or current_git_commit()
        cursor = conn.execute(
            "INSERT INTO sessions (timestamp, description, git_commit) VALUES (?, ?, ?)",
            (session.timestamp.isoformat(), session.description, git_commit),
        )
        session_id = cursor.lastrowid
        if session_id is None:
            msg = "Failed to get session ID"
            raise RuntimeError(msg)

        conn.executemany(
            """
            INSERT INTO results (
                session_id, group_name, algorithm, n,
                mean_ms, median_ms, stddev_ms, cv, min_ms, max_ms,
                runs, outliers_removed, checksum, correct, error
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    session_id,
                    r.group,
                    r.algorithm,
                    str(r.n),
                    _ms(r.stats.mean),
                    _ms(r.stats.median),
                    _ms(r.stats.stddev),
                    r.stats.cv,
                    _ms(r.stats.min),
                    _ms(r.stats.max),
                    len(r.stats.times),
                    len(r.stats.outliers),
                    None if r.checksum is None else str(r.checksum),
                    int(r.correct),
                    r.error,
                )
                for r in session.results
            ],
        )
        conn.executemany(
            "INSERT INTO environment (session_id, name, version) VALUES (?, ?, ?)",
            [(session_id, name, version) for name, version in session.environment.items()],
        )
        conn.commit()

        session.id = session_id
        logger.info("Saved session #%d with %d results", session_id, len(session.results))
        return session_id

    def load_session(self, session_id: int) -> Session | None:
        """Load a session by ID.

        Raw timings are not stored, so the loaded statistics have empty
        ``times`` and ``outliers``.

        Returns:
            The session, or None if the ID is unknown.
        """
        conn = self._connection()
        row = conn.execute(
            "SELECT timestamp, description, git_commit FROM sessions WHERE id = ?",
            (session_id,),
        ).fetchone()
        if not row:
            return None
        timestamp, description, git_commit = row

        results = []
        for (
            group,
            algorithm,
            n,
            mean_ms,
            median_ms,
            stddev_ms,
            cv,
            min_ms,
            max_ms,
            checksum,
            correct,
            error,
        ) in conn.execute(
            """
            SELECT group_name, algorithm, n, mean_ms, median_ms, stddev_ms, cv,
                   min_ms, max_ms, checksum, correct, error
            FROM results WHERE session_id = ? ORDER BY id
            """,
            (session_id,),
        ):
            stats = BenchmarkStats(
                times=(),
                mean=mean_ms / 1000,
                median=median_ms / 1000,
                stddev=stddev_ms / 1000,
                cv=cv,
                min=min_ms / 1000,
                max=max_ms / 1000,
            )
            results.append(
                BenchmarkResult(
                    group=group,
                    algorithm=algorithm,
                    n=int(n),
                    stats=stats,
                    checksum=None if checksum is None else int(checksum),
                    correct=bool(correct),
                    error=error,
                )
            )

        environment = dict(
            conn.execute(
                "SELECT name, version FROM environment WHERE session_id = ? ORDER BY id",
                (session_id,),
            ).fetchall()
        )

        return Session(
            id=session_id,
            timestamp=datetime.fromisoformat(timestamp),
            description=description,
            git_commit=git_commit,
            results=results,
            environment=environment,
        )

    def list_sessions(self) -> list[tuple[int, datetime, str | None, str | None]]:
        """Return (id, timestamp, description, git_commit) rows, newest first."""
        conn = self._connection()
        rows = conn.execute(
            "SELECT id, timestamp, description, git_commit FROM sessions ORDER BY id DESC"
        ).fetchall()
        return [(r[0], datetime.fromisoformat(r[1]), r[2], r[3]) for r in rows]

    def get_latest_session_id(self) -> int | None:
        conn = self._connection()
        row = conn.execute("SELECT MAX(id) FROM sessions").fetchone()
        return row[0] if row and row[0] else None

    def compare_sessions(
        self, id1: int, id2: int
    ) -> dict[tuple[str, str, int], tuple[float, float, float]]:
        """Compare mean times of two sessions case by case.

        Args:
            id1: Baseline session ID.
            id2: Session compared against the baseline.

        Returns:
            Mapping of (group, algorithm, n) to (mean1_ms, mean2_ms, ratio), ratio
            being mean2 / mean1. Cases missing from the second session get
            mean2 and ratio 0. Empty if either session is unknown.
        """
        first = self.load_session(id1)
        second = self.load_session(id2)
        if not first or not second:
            return {}

        later = {
            (r.group, r.algorithm, r.n): _ms(r.stats.mean)
            for r in second.results
            if not r.error
        }
        comparison: dict[tuple[str, str, int], tuple[float, float, float]] = {}
        for r in first.results:
            if r.error:
                continue
            key = (r.group, r.algorithm, r.n)
            mean1 = _ms(r.stats.mean)
            mean2 = later.get(key, 0.0)
            comparison[key] = (mean1, mean2, mean2 / mean1 if mean1 > 0 else 0.0)
        return comparison
