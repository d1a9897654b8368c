"""
SQLite‑backed document store and simple migration system.

The service treats persistence as an opaque collaborator with two
collections, ``users`` and ``exercises``, each offering ``create``,
``find_one``, ``find`` and ``find_by_id``.  ``DocumentStore`` is an
explicitly constructed handle: ``create_app`` builds one from the
settings, keeps it on ``app.state`` and route handlers receive it
through the ``get_store`` dependency.

Documents are plain dictionaries keyed by field name.  Filters follow
a small subset of the familiar query‑document syntax: a value matches
by equality, and a nested dictionary may use the ``$gt``, ``$gte``,
``$lt``, ``$lte`` and ``$eq`` operators.  Datetime fields are stored as
ISO‑8601 text (naive UTC) so that lexical and chronological order
agree.

Every ``sqlite3.Error`` is re‑raised as ``PersistenceError``.
"""

import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from fastapi import Request

from .errors import PersistenceError


logger = logging.getLogger(__name__)

Document = Dict[str, Any]


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS exercises (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            description TEXT NOT NULL,
            duration REAL NOT NULL,
            date TEXT NOT NULL,
            FOREIGN KEY(user_id) REFERENCES users(id)
        );

        CREATE INDEX IF NOT EXISTS idx_exercises_user_date ON exercises (user_id, date);
        """,
    ),
]


_OPERATORS = {
    "$eq": "=",
    "$gt": ">",
    "$gte": ">=",
    "$lt": "<",
    "$lte": "<=",
}


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class Collection:
    """A named set of documents mapped onto one SQLite table.

    ``fields`` maps document keys to column names.  The ``id`` key is
    always present and is generated by ``create``.
    """

    def __init__(
        self,
        store: "DocumentStore",
        table: str,
        fields: Dict[str, str],
        datetime_fields: Tuple[str, ...] = (),
    ) -> None:
        self.store = store
        self.table = table
        self.fields = {"id": "id", **fields}
        self.datetime_fields = set(datetime_fields)

    def _column(self, key: str) -> str:
        try:
            return self.fields[key]
        except KeyError:
            raise ValueError(f"Unknown field '{key}' for collection '{self.table}'") from None

    def _to_storage(self, key: str, value: Any) -> Any:
        if key in self.datetime_fields and isinstance(value, datetime):
            return value.isoformat(timespec="microseconds")
        return value

    def _to_document(self, row: sqlite3.Row) -> Document:
        doc: Document = {}
        for key, column in self.fields.items():
            value = row[column]
            if key in self.datetime_fields and value is not None:
                value = datetime.fromisoformat(value)
            doc[key] = value
        return doc

    def _where(self, filter: Optional[Document]) -> Tuple[str, List[Any]]:
        """Translate a filter document into a WHERE clause and its parameters."""
        clauses: List[str] = []
        params: List[Any] = []
        for key, condition in (filter or {}).items():
            column = self._column(key)
            if isinstance(condition, dict):
                for op, operand in condition.items():
                    if op not in _OPERATORS:
                        raise ValueError(f"Unsupported operator '{op}'")
                    clauses.append(f"{column} {_OPERATORS[op]} ?")
                    params.append(self._to_storage(key, operand))
            else:
                clauses.append(f"{column} = ?")
                params.append(self._to_storage(key, condition))
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    def create(self, document: Document) -> Document:
        """Insert a new document and return it with its generated ``id``."""
        doc = {**document, "id": uuid.uuid4().hex}
        keys = [key for key in self.fields if key in doc]
        columns = ", ".join(self.fields[key] for key in keys)
        placeholders = ", ".join("?" for _ in keys)
        values = tuple(self._to_storage(key, doc[key]) for key in keys)
        with self.store.cursor() as cursor:
            cursor.execute(
                f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
                values,
            )
        return doc

    def find(self, filter: Optional[Document] = None, limit: int = 0) -> List[Document]:
        """Return documents matching ``filter`` in insertion order.

        A ``limit`` of zero or less means no limit.
        """
        where, params = self._where(filter)
        columns = ", ".join(self.fields.values())
        query = f"SELECT {columns} FROM {self.table}{where} ORDER BY rowid"
        if limit > 0:
            query += " LIMIT ?"
            params.append(limit)
        with self.store.cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        return [self._to_document(row) for row in rows]

    def find_one(self, filter: Optional[Document] = None) -> Optional[Document]:
        docs = self.find(filter, limit=1)
        return docs[0] if docs else None

    def find_by_id(self, doc_id: str) -> Optional[Document]:
        return self.find_one({"id": doc_id})


class DocumentStore:
    """Handle to the SQLite database holding the ``users`` and ``exercises`` collections.

    The handle itself keeps no open connection: each operation opens a
    connection, runs, commits and closes it again.
    """

    def __init__(self, database_url: str) -> None:
        self.path = get_database_path(database_url)
        self.users = Collection(self, "users", {"username": "username"})
        self.exercises = Collection(
            self,
            "exercises",
            {
                "userId": "user_id",
                "description": "description",
                "duration": "duration",
                "date": "date",
            },
            datetime_fields=("date",),
        )

    def connect(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection with name‑keyed rows."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        # Foreign key support is off by default and must be enabled per connection.
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and close the connection on exit."""
        try:
            conn = self.connect()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not open document store: {exc}") from exc
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(f"Document store operation failed: {exc}") from exc
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the schema and apply pending migrations.

        Applied migration versions are recorded in the ``migrations``
        table; new entries in ``MIGRATIONS`` must use an incremented
        version number.
        """
        with self.cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) as version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    logger.info("Applying migration %s to %s", version, self.path)
                    cursor.executescript(sql)
                    cursor.execute(
                        "INSERT INTO migrations (version) VALUES (?)", (version,)
                    )
                    current_version = version


def get_store(request: Request) -> DocumentStore:
    """FastAPI dependency returning the store attached to the running app."""
    return request.app.state.store
