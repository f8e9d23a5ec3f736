"""DuckDB-backed persistence for recent searches."""

from datetime import datetime
from pathlib import Path
from typing import Any

import duckdb

from nda_search.exceptions import HistoryError
from nda_search.history.recent import DEFAULT_MAX_ENTRIES, RecentSearchHistory


class DuckDBHistoryStore:
    """Search log stored in a DuckDB database.

    Each query keeps one row holding its latest outcome, and only the
    newest ``max_entries`` queries are kept. The recent-search history is
    rebuilt from those rows.

    Attributes:
        db_path: Path to the DuckDB database file, or None for in-memory.
        max_entries: Number of distinct queries kept.
    """

    _CREATE_SEQUENCE = "CREATE SEQUENCE IF NOT EXISTS search_history_seq"

    _CREATE_TABLE = """
        CREATE TABLE IF NOT EXISTS search_history (
            id BIGINT PRIMARY KEY DEFAULT nextval('search_history_seq'),
            query VARCHAR NOT NULL,
            outcome VARCHAR NOT NULL,
            result_count INTEGER NOT NULL DEFAULT 0,
            searched_at TIMESTAMP NOT NULL
        )
    """

    _CREATE_INDEX = """
        CREATE INDEX IF NOT EXISTS idx_history_query
        ON search_history(query)
    """

    _INSERT = """
        INSERT INTO search_history (query, outcome, result_count, searched_at)
        VALUES (?, ?, ?, ?)
    """

    _SELECT_RECENT = """
        SELECT query
        FROM search_history
        GROUP BY query
        ORDER BY MAX(id) DESC
        LIMIT ?
    """

    _SELECT_ENTRIES = """
        SELECT query, outcome, result_count, searched_at
        FROM search_history
        ORDER BY id DESC
        LIMIT ?
    """

    _COUNT_BY_QUERY = "SELECT COUNT(*) FROM search_history WHERE query = ?"

    _DELETE_BY_QUERY = "DELETE FROM search_history WHERE query = ?"

    _COUNT_ALL = "SELECT COUNT(*) FROM search_history"

    _DELETE_ALL = "DELETE FROM search_history"

    _DELETE_OLDEST = """
        DELETE FROM search_history
        WHERE id NOT IN (
            SELECT id FROM search_history ORDER BY id DESC LIMIT ?
        )
    """

    def __init__(
        self,
        db_path: Path | str | None = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        """Open (and create if needed) the history database.

        Args:
            db_path: Path to the database file. If None, uses in-memory database.
            max_entries: Number of distinct queries kept.

        Raises:
            HistoryError: If the database cannot be opened.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._db_path = Path(db_path) if db_path else None
        self._conn: duckdb.DuckDBPyConnection | None = None
        self._init_db()

    @property
    def db_path(self) -> Path | None:
        return self._db_path

    def _init_db(self) -> None:
        try:
            if self._db_path:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                self._conn = duckdb.connect(str(self._db_path))
            else:
                self._conn = duckdb.connect(":memory:")

            self._conn.execute(self._CREATE_SEQUENCE)
            self._conn.execute(self._CREATE_TABLE)
            self._conn.execute(self._CREATE_INDEX)

        except (duckdb.Error, OSError) as e:
            raise HistoryError(f"Failed to open history database: {e}") from e

    def _ensure_connection(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            self._init_db()
        if self._conn is None:
            raise HistoryError("History database not available")
        return self._conn

    def record(self, query: str, outcome: str, result_count: int = 0) -> None:
        """Record a search as the latest row for its query.

        Earlier rows for the query are replaced, and the oldest queries
        beyond ``max_entries`` are dropped.

        Args:
            query: The query as searched.
            outcome: Terminal state kind, e.g. "exact_hit" or "no_match".
            result_count: Number of elements the search produced.
        """
        try:
            conn = self._ensure_connection()
            conn.execute(self._DELETE_BY_QUERY, [query])
            conn.execute(self._INSERT, [query, outcome, result_count, datetime.now()])
            conn.execute(self._DELETE_OLDEST, [self.max_entries])
        except duckdb.Error as e:
            raise HistoryError(f"Failed to record search: {e}") from e

    def recent(self, limit: int = DEFAULT_MAX_ENTRIES) -> list[str]:
        """Most recent distinct queries, newest first."""
        try:
            conn = self._ensure_connection()
            rows = conn.execute(self._SELECT_RECENT, [limit]).fetchall()
        except duckdb.Error as e:
            raise HistoryError(f"Failed to read history: {e}") from e
        return [row[0] for row in rows]

    def entries(self, limit: int = 50) -> list[dict[str, Any]]:
        """Raw log rows, newest first."""
        try:
            conn = self._ensure_connection()
            rows = conn.execute(self._SELECT_ENTRIES, [limit]).fetchall()
        except duckdb.Error as e:
            raise HistoryError(f"Failed to read history: {e}") from e
        return [
            {
                "query": row[0],
                "outcome": row[1],
                "result_count": row[2],
                "searched_at": row[3],
            }
            for row in rows
        ]

    def load(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> RecentSearchHistory:
        """Rebuild the recent-search history from the log."""
        return RecentSearchHistory(self.recent(max_entries), max_entries=max_entries)

    def remove(self, query: str) -> int:
        """Delete every log row for a query.

        Returns:
            The number of rows removed.
        """
        query = query.strip()
        try:
            conn = self._ensure_connection()
            result = conn.execute(self._COUNT_BY_QUERY, [query]).fetchone()
            count = result[0] if result else 0
            if count:
                conn.execute(self._DELETE_BY_QUERY, [query])
            return count
        except duckdb.Error as e:
            raise HistoryError(f"Failed to remove history entry: {e}") from e

    def clear(self) -> int:
        """Delete the whole log and return the number of rows removed."""
        try:
            conn = self._ensure_connection()
            count = self.count()
            conn.execute(self._DELETE_ALL)
            return count
        except duckdb.Error as e:
            raise HistoryError(f"Failed to clear history: {e}") from e

    def count(self) -> int:
        try:
            conn = self._ensure_connection()
            result = conn.execute(self._COUNT_ALL).fetchone()
            return result[0] if result else 0
        except duckdb.Error as e:
            raise HistoryError(f"Failed to count history entries: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "DuckDBHistoryStore":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        path = str(self._db_path) if self._db_path else ":memory:"
        return f"DuckDBHistoryStore(path={path!r}, max_entries={self.max_entries})"
