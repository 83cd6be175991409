"""SQLite-backed compliance score history stored in .codeplug/ at the project root."""

from __future__ import annotations

import hashlib
import json
import sqlite3
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..config import SCORE_DB_FILE
from ..exceptions import SchemaValidationError, StoreWriteError
from ..logging_config import get_logger
from ..models import ScoreRecord
from .json_store import state_dir
from .schema import ScoreRecordModel

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


def project_hash(project_root: Path) -> str:
    """Stable 12-hex-digit key for a project path."""
    return hashlib.sha256(str(Path(project_root).resolve()).encode("utf-8")).hexdigest()[:12]


class ScoreStore:
    """Manages the ``.codeplug/scores.db`` SQLite database.

    Usage::

        with ScoreStore("/path/to/project") as store:
            store.save(record)
            recent = store.history(limit=8)
    """

    def __init__(self, project_root: Path) -> None:
        self.db_dir: Path = state_dir(project_root)
        self.db_path: Path = self.db_dir / SCORE_DB_FILE
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise RuntimeError("ScoreStore is not connected. Use as context manager or call connect().")
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations."""
        try:
            self.db_dir.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as e:
            raise StoreWriteError(self.db_path, str(e))
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._migrate()
        logger.debug("Score DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> ScoreStore:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        c = self.conn
        try:
            c.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = c.execute("SELECT version FROM schema_version").fetchone()
            if row is None:
                c.execute("INSERT INTO schema_version (version) VALUES (?)", (_SCHEMA_VERSION,))
            elif row["version"] > _SCHEMA_VERSION:
                raise SchemaValidationError(
                    self.db_path, f"schema version {row['version']} is newer than {_SCHEMA_VERSION}"
                )
            c.execute(
                """
                CREATE TABLE IF NOT EXISTS scores (
                    id           TEXT    PRIMARY KEY,
                    project_hash TEXT    NOT NULL,
                    score        INTEGER NOT NULL,
                    breakdown    TEXT    NOT NULL,
                    created_at   TEXT    NOT NULL
                )
                """
            )
            c.execute(
                "CREATE INDEX IF NOT EXISTS idx_scores_project ON scores(project_hash, created_at)"
            )
            c.commit()
        except sqlite3.Error as e:
            raise StoreWriteError(self.db_path, str(e))

    # ── records ───────────────────────────────────────────────────

    def save(self, record: ScoreRecord) -> None:
        """Append one record.

        Raises:
            StoreWriteError: The insert failed
        """
        try:
            self.conn.execute(
                "INSERT INTO scores (id, project_hash, score, breakdown, created_at) VALUES (?, ?, ?, ?, ?)",
                (
                    record.id,
                    record.project_hash,
                    record.score,
                    json.dumps(record.breakdown),
                    record.created_at,
                ),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise StoreWriteError(self.db_path, str(e))

    def _to_record(self, row: sqlite3.Row) -> ScoreRecord:
        try:
            breakdown = json.loads(row["breakdown"])
            model = ScoreRecordModel(
                id=row["id"],
                project_hash=row["project_hash"],
                score=row["score"],
                breakdown=breakdown,
                created_at=row["created_at"],
            )
        except (ValueError, ValidationError) as e:
            raise SchemaValidationError(self.db_path, f"record {row['id']}: {e}")
        return ScoreRecord(**model.model_dump())

    def latest(self, project: Optional[str] = None) -> Optional[ScoreRecord]:
        """Most recent record, optionally restricted to one project hash."""
        history = self.history(limit=1, project=project)
        return history[-1] if history else None

    def history(self, limit: Optional[int] = None, project: Optional[str] = None) -> list[ScoreRecord]:
        """The last ``limit`` records (all if None), oldest first."""
        query = "SELECT * FROM scores"
        params: list = []
        if project is not None:
            query += " WHERE project_hash = ?"
            params.append(project)
        query += " ORDER BY created_at DESC, rowid DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        rows = self.conn.execute(query, params).fetchall()
        return [self._to_record(row) for row in reversed(rows)]
