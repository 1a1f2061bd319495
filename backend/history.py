"""SQLite-backed local history of past analyses.

Table: history
- seq (integer, primary key, insertion order)
- id (text, unique)
- url (text)
- score (integer, nullable)
- result_json (text)
- timestamp (text, UTC ISO 8601)

Only the newest `max_entries` rows are kept; older rows are evicted on insert.
"""

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import sqlite3
import uuid

from models import AnalysisResult, HistoryEntry

logger = logging.getLogger(__name__)

MAX_HISTORY = 10


class HistoryStore:
    def __init__(self, path: Path | str, max_entries: int = MAX_HISTORY) -> None:
        self.path = Path(path)
        self.max_entries = max(1, int(max_entries))

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def init(self) -> None:
        """Create the history table if it does not exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS history (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    url TEXT NOT NULL,
                    score INTEGER,
                    result_json TEXT NOT NULL,
                    timestamp TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def add(self, url: str, result: AnalysisResult) -> HistoryEntry:
        """Store `result` as the newest entry and evict beyond the cap."""
        score = result.get("aiSuggestions", {}).get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            score = None
        entry: HistoryEntry = {
            "id": uuid.uuid4().hex,
            "url": url,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "score": score,
            "result": result,
        }

        conn = self._connect()
        try:
            conn.execute(
                "INSERT INTO history (id, url, score, result_json, timestamp) VALUES (?, ?, ?, ?, ?)",
                (entry["id"], url, score, json.dumps(result), entry["timestamp"]),
            )
            conn.execute(
                """
                DELETE FROM history
                WHERE seq NOT IN (SELECT seq FROM history ORDER BY seq DESC LIMIT ?)
                """,
                (self.max_entries,),
            )
            conn.commit()
        finally:
            conn.close()
        return entry

    def list(self) -> list[HistoryEntry]:
        """Return stored entries, newest first."""
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT id, url, score, result_json, timestamp FROM history ORDER BY seq DESC"
            ).fetchall()
        finally:
            conn.close()

        out: list[HistoryEntry] = []
        for row in rows:
            entry = self._row_to_entry(row)
            if entry is not None:
                out.append(entry)
        return out

    def get(self, entry_id: str) -> HistoryEntry | None:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT id, url, score, result_json, timestamp FROM history WHERE id = ?",
                (entry_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return self._row_to_entry(row)

    def clear(self) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM history")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> HistoryEntry | None:
        try:
            result = json.loads(row["result_json"])
        except (TypeError, ValueError):
            logger.warning("Skipping corrupt history entry %s", row["id"])
            return None
        return {
            "id": row["id"],
            "url": row["url"],
            "timestamp": row["timestamp"],
            "score": row["score"],
            "result": result,
        }
