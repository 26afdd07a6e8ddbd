"""Bounded scan history, most recent first."""

import sqlite3
from pathlib import Path
from typing import Optional, Protocol

from labelscan.logger import get_logger
from labelscan.models.scan import ScanResult

logger = get_logger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_KEY = "label_scan_history_v1"


class HistoryStore(Protocol):
    """Storage capability handed to the scan service."""

    def append(self, scan: ScanResult) -> None:
        ...

    def list(self, limit: Optional[int] = None) -> list[ScanResult]:
        ...

    def get_by_id(self, scan_id: str) -> Optional[ScanResult]:
        ...

    def clear(self) -> None:
        ...


class InMemoryHistoryStore:
    """History kept in process memory."""

    def __init__(self, max_entries: int = DEFAULT_LIMIT):
        self.max_entries = max_entries
        self._scans: list[ScanResult] = []

    def append(self, scan: ScanResult) -> None:
        self._scans.insert(0, scan)
        del self._scans[self.max_entries:]

    def list(self, limit: Optional[int] = None) -> list[ScanResult]:
        if limit is None or limit < 0:
            return list(self._scans)
        return self._scans[:limit]

    def get_by_id(self, scan_id: str) -> Optional[ScanResult]:
        return next((s for s in self._scans if s.id == scan_id), None)

    def clear(self) -> None:
        self._scans.clear()


class SQLiteHistoryStore:
    """SQLite history with one row per scan.

    Several histories can share a database file; each is addressed by its key.
    """

    def __init__(
        self,
        db_path: Path | str,
        key: str = DEFAULT_KEY,
        max_entries: int = DEFAULT_LIMIT,
    ):
        self.db_path = Path(db_path)
        self.key = key
        self.max_entries = max_entries
        self._init_db()
        logger.debug(f"SQLiteHistoryStore initialized with db: {self.db_path} (key={self.key})")

    def _init_db(self):
        """Initialize the database table."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS scans (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    history_key TEXT NOT NULL,
                    id TEXT NOT NULL,
                    timestamp INTEGER NOT NULL,
                    verdict TEXT,
                    risk_level TEXT,
                    data TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_scans_key ON scans(history_key, seq)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_scans_id ON scans(history_key, id)")
            conn.commit()
        logger.debug("Database table initialized")

    def append(self, scan: ScanResult) -> None:
        """Store a scan and drop the oldest entries beyond the cap."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO scans (history_key, id, timestamp, verdict, risk_level, data)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    self.key,
                    scan.id,
                    scan.timestamp,
                    scan.verdict,
                    scan.risk_level.value,
                    scan.model_dump_json(),
                ),
            )
            cursor = conn.execute(
                """
                DELETE FROM scans WHERE history_key = ? AND seq NOT IN (
                    SELECT seq FROM scans WHERE history_key = ? ORDER BY seq DESC LIMIT ?
                )
                """,
                (self.key, self.key, self.max_entries),
            )
            conn.commit()

        if cursor.rowcount:
            logger.debug(f"Evicted {cursor.rowcount} old scans from history")
        logger.info(f"Saved scan {scan.id} to history")

    def list(self, limit: Optional[int] = None) -> list[ScanResult]:
        """Return stored scans, most recent first. A negative or missing limit returns all."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT id, data FROM scans WHERE history_key = ? ORDER BY seq DESC LIMIT ?",
                (self.key, -1 if limit is None or limit < 0 else limit),
            )
            rows = cursor.fetchall()

        scans = []
        for row in rows:
            try:
                scans.append(ScanResult.model_validate_json(row[1]))
            except ValueError as e:
                logger.error(f"Failed to parse scan {row[0]}: {e}")
        return scans

    def get_by_id(self, scan_id: str) -> Optional[ScanResult]:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT data FROM scans WHERE history_key = ? AND id = ? ORDER BY seq DESC LIMIT 1",
                (self.key, scan_id),
            )
            row = cursor.fetchone()

        if row is None:
            logger.debug(f"Scan {scan_id} not found in history")
            return None
        return ScanResult.model_validate_json(row[0])

    def clear(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM scans WHERE history_key = ?", (self.key,))
            conn.commit()
        logger.info(f"Cleared history {self.key}")
