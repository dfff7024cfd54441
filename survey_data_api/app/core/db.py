"""
SQLite record store and simple migration system.

``RecordStore`` is the handle the rest of the application uses to
reach persistent storage.  It is constructed once at process start
(see ``main.create_app``) and passed explicitly to whoever needs it;
there is no module‑level connection.  Each operation opens its own
connection and closes it before returning, so a single handle can be
shared by concurrent requests and SQLite's locking provides the
atomicity of individual inserts, deletes and reads.

The store exposes the four document‑store primitives the gateway
relies on (``insert_many``, ``find``, ``count``, ``delete_all``) plus
``insert_many_if_empty`` and ``replace_all``, which each pair a check
or a delete with the insert in one write transaction.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from survey_data_api.app.core.config import Settings
from survey_data_api.app.schemas.record import FIELD_DOMAINS, RECORD_FIELDS


def _domain_check(column: str) -> str:
    values = ", ".join(f"'{value.lower()}'" for value in FIELD_DOMAINS[column])
    return f"CHECK (lower({column}) IN ({values}))"


MIGRATIONS: List[tuple] = [
    # Migration 1: records table.  Domain membership is checked
    # case‑insensitively; the stored value keeps its original casing.
    (
        1,
        f"""
        CREATE TABLE IF NOT EXISTS records (
            id TEXT PRIMARY KEY,
            age TEXT NOT NULL {_domain_check('age')},
            gender TEXT NOT NULL {_domain_check('gender')},
            location TEXT NOT NULL {_domain_check('location')},
            device TEXT NOT NULL {_domain_check('device')},
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: indices on the filterable columns
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_records_age ON records(age);
        CREATE INDEX IF NOT EXISTS idx_records_gender ON records(gender);
        CREATE INDEX IF NOT EXISTS idx_records_location ON records(location);
        CREATE INDEX IF NOT EXISTS idx_records_device ON records(device);
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used directly.  Relative paths are resolved
    against the project root (the directory holding ``survey_data_api``).
    """
    if database_url == ":memory:" or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RecordStore:
    """Handle to the SQLite file holding survey records."""

    def __init__(self, database_path: str) -> None:
        if database_path == ":memory:":
            # Every operation opens a fresh connection, so an in‑memory
            # database would be empty each time.
            raise ValueError("RecordStore requires a file path, not ':memory:'")
        self.database_path = database_path

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecordStore":
        return cls(resolve_database_path(settings.database_url))

    def get_connection(self) -> sqlite3.Connection:
        """Create and return a new connection in autocommit mode.

        Transactions are opened explicitly by ``_transaction`` so that
        multi‑statement writes can take the write lock up front.
        """
        conn = sqlite3.connect(self.database_path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self, immediate: bool = False) -> Iterator[sqlite3.Cursor]:
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            try:
                yield cursor
            except BaseException:
                conn.rollback()
                raise
            conn.commit()
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create the database file if needed and apply pending migrations."""
        with self._transaction(immediate=True) as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    # executescript would commit the open transaction, so
                    # run the statements one at a time instead.
                    for statement in sql.split(";"):
                        if statement.strip():
                            cursor.execute(statement)
                    cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    current_version = version

    # ------------------------------------------------------------------
    # Document‑store primitives
    # ------------------------------------------------------------------
    def insert_many(self, records: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Insert ``records`` in order and return them with id and timestamps.

        All rows are written in one transaction; if any insert fails none
        of them are kept.
        """
        with self._transaction() as cursor:
            return self._insert(cursor, records)

    def insert_many_if_empty(self, records: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Insert ``records`` only if the table holds no rows.

        The count and the insert run under a single ``BEGIN IMMEDIATE``
        transaction, so two callers racing on an empty store cannot both
        observe zero.  Returns the inserted rows, or ``[]`` when the
        store was already populated.
        """
        with self._transaction(immediate=True) as cursor:
            if self._count(cursor) > 0:
                return []
            return self._insert(cursor, records)

    def find(self, predicate: Mapping[str, Iterable[str]]) -> List[Dict[str, Any]]:
        """Return records matching every field constraint in ``predicate``.

        ``predicate`` maps a field name to the values it may take.  Within
        a field any listed value matches; across fields all constraints
        must hold.  An empty predicate matches every record.  Comparison
        is exact (case‑sensitive).
        """
        query = "SELECT * FROM records"
        params: List[str] = []
        where_clauses: List[str] = []
        for field_name, values in predicate.items():
            if field_name not in RECORD_FIELDS:
                raise ValueError(f"Unknown record field: {field_name}")
            values = list(values)
            if not values:
                continue
            placeholders = ", ".join("?" for _ in values)
            where_clauses.append(f"{field_name} IN ({placeholders})")
            params.extend(values)
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY rowid ASC"

        conn = self.get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [dict(row) for row in rows]
        finally:
            conn.close()

    def count(self) -> int:
        conn = self.get_connection()
        try:
            return self._count(conn.cursor())
        finally:
            conn.close()

    def delete_all(self) -> int:
        """Remove every record and return how many were deleted."""
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM records")
            return cursor.rowcount

    def replace_all(self, records: Sequence[Mapping[str, Any]]) -> Tuple[int, List[Dict[str, Any]]]:
        """Delete every record and insert ``records`` in one write transaction.

        Returns the number of rows removed and the inserted rows.
        """
        with self._transaction(immediate=True) as cursor:
            cursor.execute("DELETE FROM records")
            deleted = cursor.rowcount
            return deleted, self._insert(cursor, records)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _count(cursor: sqlite3.Cursor) -> int:
        return cursor.execute("SELECT COUNT(*) FROM records").fetchone()[0]

    @staticmethod
    def _insert(cursor: sqlite3.Cursor, records: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        inserted: List[Dict[str, Any]] = []
        for record in records:
            now = _utcnow()
            row = {
                "id": uuid.uuid4().hex,
                **{name: record[name] for name in RECORD_FIELDS},
                "created_at": now,
                "updated_at": now,
            }
            cursor.execute(
                """
                INSERT INTO records (id, age, gender, location, device, created_at, updated_at)
                VALUES (:id, :age, :gender, :location, :device, :created_at, :updated_at)
                """,
                row,
            )
            inserted.append(row)
        return inserted
