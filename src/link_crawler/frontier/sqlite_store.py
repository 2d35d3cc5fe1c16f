"""SQLite-backed frontier store: queue, visited set, results, and event log."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import sqlite3
import time
from typing import Any

from link_crawler.domain.model import FrontierEntry
from link_crawler.frontier.sqlite_pragmas import apply_read_pragmas, apply_write_pragmas


logger = logging.getLogger(__name__)


class DatabaseCriticalError(RuntimeError):
    """The frontier database could not be opened after all retries.

    Unlike fetch and parse failures this one is fatal: without the store the
    crawl has no frontier to work from.
    """


# Maximum retries for self-healing connection attempts
_MAX_CONNECT_RETRIES = 3
_RETRY_DELAY_SECONDS = 0.5


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteFrontierStore:
    """Persist the crawl frontier in SQLite so a crawl can be resumed.

    Queue order is ``priority ASC`` then insertion order. URLs are compared as
    exact strings, matching :class:`InMemoryFrontierStore`.
    """

    EVENT_TYPES = frozenset({"enqueued", "dequeued", "visited", "matched", "cleared"})

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self.db_root = self.db_path.parent
        self.db_root.mkdir(parents=True, exist_ok=True)
        self._initialize_schema()

    def _connect(self, *, read_only: bool = False) -> sqlite3.Connection:
        """Connect to SQLite, retrying transient failures with backoff.

        Raises DatabaseCriticalError once retries are exhausted.
        """
        last_error: sqlite3.Error | None = None

        for attempt in range(_MAX_CONNECT_RETRIES):
            try:
                self.db_root.mkdir(parents=True, exist_ok=True)

                # Autocommit; writers open explicit transactions
                conn = sqlite3.connect(self.db_path, isolation_level=None)
                if read_only:
                    apply_read_pragmas(conn)
                else:
                    apply_write_pragmas(conn)
                conn.row_factory = sqlite3.Row
                return conn
            except sqlite3.Error as exc:
                last_error = exc
                if attempt < _MAX_CONNECT_RETRIES - 1:
                    delay = _RETRY_DELAY_SECONDS * (2**attempt)
                    logger.warning(
                        "SQLite connect attempt %d/%d failed for %s: %s. Retrying in %.1fs...",
                        attempt + 1,
                        _MAX_CONNECT_RETRIES,
                        self.db_path,
                        exc,
                        delay,
                    )
                    time.sleep(delay)
                else:
                    logger.warning(
                        "SQLite connect attempt %d/%d failed for %s: %s. No retries left.",
                        attempt + 1,
                        _MAX_CONNECT_RETRIES,
                        self.db_path,
                        exc,
                    )

        logger.critical("Unable to open frontier database at %s: %s", self.db_path, last_error)
        raise DatabaseCriticalError(
            f"Unable to open database at {self.db_path} after {_MAX_CONNECT_RETRIES} attempts: {last_error}"
        )

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()

    @contextmanager
    def _reader(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect(read_only=True)
        try:
            yield conn
        finally:
            conn.close()

    def _initialize_schema(self) -> None:
        conn = self._connect()
        try:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS crawl_queue (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    url TEXT NOT NULL UNIQUE,
                    priority INTEGER NOT NULL DEFAULT 0,
                    discovered_from TEXT,
                    enqueued_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_crawl_queue_order ON crawl_queue (priority ASC, id ASC);
                CREATE TABLE IF NOT EXISTS crawl_visited (
                    url TEXT PRIMARY KEY,
                    visited_at TEXT NOT NULL
                );
                CREATE TABLE IF NOT EXISTS crawl_results (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    url TEXT NOT NULL,
                    matched_at TEXT NOT NULL
                );
                CREATE TABLE IF NOT EXISTS crawl_events (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    event_at TEXT NOT NULL,
                    url TEXT,
                    event_type TEXT NOT NULL,
                    detail TEXT
                );
                CREATE INDEX IF NOT EXISTS idx_crawl_events_url ON crawl_events (url, id);
                """
            )
        finally:
            conn.close()

    def _record_event(
        self,
        conn: sqlite3.Connection,
        *,
        url: str | None,
        event_type: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        payload = json.dumps(detail, sort_keys=True) if detail else None
        conn.execute(
            "INSERT INTO crawl_events (event_at, url, event_type, detail) VALUES (?, ?, ?, ?)",
            (_utcnow(), url, event_type, payload),
        )

    def exists_in_frontier_or_visited(self, url: str) -> bool:
        with self._reader() as conn:
            row = conn.execute(
                """
                SELECT 1 FROM crawl_queue WHERE url = ?
                UNION ALL
                SELECT 1 FROM crawl_visited WHERE url = ?
                LIMIT 1
                """,
                (url, url),
            ).fetchone()
        return row is not None

    def enqueue(self, priority: int, url: str, *, discovered_from: str | None = None) -> None:
        entry = FrontierEntry(url=url, priority=priority, discovered_from=discovered_from)
        with self._transaction() as conn:
            visited = conn.execute("SELECT 1 FROM crawl_visited WHERE url = ?", (entry.url,)).fetchone()
            if visited:
                return
            conn.execute(
                """
                INSERT OR IGNORE INTO crawl_queue (url, priority, discovered_from, enqueued_at)
                VALUES (?, ?, ?, ?)
                """,
                (entry.url, entry.priority, entry.discovered_from, _utcnow()),
            )
            if conn.execute("SELECT changes()").fetchone()[0]:
                self._record_event(
                    conn,
                    url=entry.url,
                    event_type="enqueued",
                    detail={"priority": entry.priority, "discovered_from": entry.discovered_from},
                )

    def mark_visited(self, url: str) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM crawl_queue WHERE url = ?", (url,))
            conn.execute(
                "INSERT INTO crawl_visited (url, visited_at) VALUES (?, ?)"
                " ON CONFLICT(url) DO UPDATE SET visited_at=excluded.visited_at",
                (url, _utcnow()),
            )
            self._record_event(conn, url=url, event_type="visited")

    def next_url(self) -> str:
        with self._transaction() as conn:
            row = conn.execute("SELECT id, url FROM crawl_queue ORDER BY priority ASC, id ASC LIMIT 1").fetchone()
            if row is None:
                return ""
            # Dequeue is destructive; the URL is marked visited by the caller
            conn.execute("DELETE FROM crawl_queue WHERE id = ?", (row["id"],))
            self._record_event(conn, url=row["url"], event_type="dequeued")
        return row["url"]

    def record_match(self, url: str) -> None:
        with self._transaction() as conn:
            conn.execute("INSERT INTO crawl_results (url, matched_at) VALUES (?, ?)", (url, _utcnow()))
            self._record_event(conn, url=url, event_type="matched")

    def drain_results(self) -> list[str]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT url FROM crawl_results ORDER BY id ASC").fetchall()
            conn.execute("DELETE FROM crawl_results")
        return [row["url"] for row in rows]

    def queue_depth(self) -> int:
        with self._reader() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM crawl_queue").fetchone()[0])

    def visited_count(self) -> int:
        with self._reader() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM crawl_visited").fetchone()[0])

    def queued_entries(self) -> list[FrontierEntry]:
        with self._reader() as conn:
            rows = conn.execute(
                "SELECT url, priority, discovered_from FROM crawl_queue ORDER BY priority ASC, id ASC"
            ).fetchall()
        return [
            FrontierEntry(url=row["url"], priority=row["priority"], discovered_from=row["discovered_from"])
            for row in rows
        ]

    def is_visited(self, url: str) -> bool:
        with self._reader() as conn:
            return conn.execute("SELECT 1 FROM crawl_visited WHERE url = ?", (url,)).fetchone() is not None

    def clear(self) -> int:
        """Drop queue, visited set and results. Returns the number of rows removed."""
        with self._transaction() as conn:
            removed = 0
            for table in ("crawl_queue", "crawl_visited", "crawl_results"):
                removed += conn.execute(f"DELETE FROM {table}").rowcount
            self._record_event(conn, url=None, event_type="cleared", detail={"rows": removed})
        logger.info("Cleared %d frontier rows from %s", removed, self.db_path)
        return removed

    def get_event_log(self, *, url: str | None = None, limit: int = 100) -> list[dict[str, Any]]:
        """Return recent events, newest first, optionally for a single URL."""
        if limit <= 0:
            return []
        query = "SELECT event_at, url, event_type, detail FROM crawl_events"
        params: tuple[Any, ...] = ()
        if url is not None:
            query += " WHERE url = ?"
            params = (url,)
        query += " ORDER BY id DESC LIMIT ?"
        params = (*params, limit)
        with self._reader() as conn:
            rows = conn.execute(query, params).fetchall()
        events: list[dict[str, Any]] = []
        for row in rows:
            detail = None
            if row["detail"]:
                try:
                    detail = json.loads(row["detail"])
                except json.JSONDecodeError:
                    detail = None
            events.append(
                {"event_at": row["event_at"], "url": row["url"], "event_type": row["event_type"], "detail": detail}
            )
        return events
