"""
Persistent translation cache.

This module stores finished translations in a relational table so that a
text already translated with the same language pair and options is never
sent to the remote API again. Two engines are supported:
    - SQLiteTranslationCache: a local database file (the default)
    - PostgresTranslationCache: a shared server, via psycopg2

Rows are addressed by (text_digest, source_lang, target_lang,
options_digest), backed by a non-unique composite index. The table is
append-only from the translator's point of view: lookups read, inserts add,
and nothing here updates or deletes a row. Two processes translating the
same text concurrently may both insert it; lookups then use the oldest row.

License: MIT
"""

import re
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import psycopg2

from ..config.settings import (
    TRANSLATION_CACHE_BACKEND,
    TRANSLATION_CACHE_PATH,
    TRANSLATION_CACHE_TABLE,
)
from ..config.logging_config import get_logger
from ..core.connections import postgres_connection, sqlite_connection
from ..core.exceptions import StoreError

# Module-level logger for consistent logging.
logger = get_logger(__name__)

# Upper bound on digests per SELECT, below SQLite's bound-variable limit.
LOOKUP_CHUNK_SIZE = 500

_TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_COLUMNS = (
    "id",
    "text",
    "text_digest",
    "translated_text",
    "source_lang",
    "target_lang",
    "options",
    "options_digest",
    "detected_source_lang",
    "billed_units",
    "created_at",
    "updated_at",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CacheEntry:
    """
    One cached translation.

    Attributes:
        text: The original text.
        text_digest: SHA-256 digest of the text.
        translated_text: The translation returned by the provider.
        source_lang: Effective source language of the request
            ("automatic" when detection was requested).
        target_lang: Target language of the request.
        options: Canonical JSON serialization of the request options.
        options_digest: MD5 digest of options.
        detected_source_lang: Source language reported by the provider.
        billed_units: Characters billed by the provider for this text.
        created_at: Insertion time (UTC).
        updated_at: Equal to created_at; rows are never updated.
        id: Row id assigned by the database, None before insertion.
    """

    text: str
    text_digest: str
    translated_text: str
    source_lang: str
    target_lang: str
    options: str
    options_digest: str
    detected_source_lang: Optional[str] = None
    billed_units: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at


class TranslationCacheStore(ABC):
    """
    Base class for the SQL-backed translation cache.

    Subclasses provide a connection context manager, the bound-parameter
    marker of their driver, the driver's error base class and the column
    types that differ between engines.

    Args:
        table: Name of the cache table. Must be a plain SQL identifier.
    """

    placeholder = "?"
    id_column_ddl = "INTEGER PRIMARY KEY AUTOINCREMENT"
    timestamp_ddl = "TEXT"
    driver_errors: tuple = (Exception,)

    def __init__(self, table: str = TRANSLATION_CACHE_TABLE):
        if not _TABLE_NAME_PATTERN.match(table):
            raise ValueError(f"Invalid cache table name: {table!r}")
        self.table = table

    # -- engine hooks ---------------------------------------------------------

    @abstractmethod
    def _connect(self):
        """Context manager yielding (connection, cursor)."""

    def _format_timestamp(self, value: datetime) -> Any:
        return value

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        if value is None or isinstance(value, datetime):
            return value
        return datetime.fromisoformat(value)

    # -- public API -----------------------------------------------------------

    def initialize(self) -> None:
        """
        Create the cache table and its lookup index if they don't exist.

        Safe to call repeatedly.

        Raises:
            StoreError: If the database is unreachable or rejects the DDL.
        """
        create_table = f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                id {self.id_column_ddl},
                text TEXT NOT NULL,
                text_digest VARCHAR(64) NOT NULL,
                translated_text TEXT NOT NULL,
                source_lang VARCHAR(16) NOT NULL,
                target_lang VARCHAR(16) NOT NULL,
                options TEXT,
                options_digest VARCHAR(32) NOT NULL,
                detected_source_lang VARCHAR(16),
                billed_units INTEGER,
                created_at {self.timestamp_ddl},
                updated_at {self.timestamp_ddl}
            )
        """
        create_index = (
            f"CREATE INDEX IF NOT EXISTS {self.table}_lookup_index "
            f"ON {self.table} (text_digest, source_lang, target_lang, options_digest)"
        )

        try:
            with self._connect() as (conn, cursor):
                cursor.execute(create_table)
                cursor.execute(create_index)
        except self.driver_errors as e:
            raise StoreError(f"Could not initialize cache table {self.table}: {e}") from e

        logger.info(f"Translation cache table '{self.table}' is ready")

    def lookup(
        self,
        text_digests: Iterable[str],
        source_lang: str,
        target_lang: str,
        options_digest: str
    ) -> Dict[str, CacheEntry]:
        """
        Fetch cached translations for a batch of text digests.

        Args:
            text_digests: Digests to look up; duplicates are ignored.
            source_lang: Exact source language of the request.
            target_lang: Exact target language of the request.
            options_digest: Digest of the canonical request options.

        Returns:
            Mapping of text digest to entry, containing only the digests
            present in the cache. Where equivalent rows exist, the oldest
            one is returned.

        Raises:
            StoreError: If the database cannot be queried.
        """
        digests = list(dict.fromkeys(text_digests))
        if not digests:
            return {}

        found: Dict[str, CacheEntry] = {}
        columns = ", ".join(_COLUMNS)

        try:
            with self._connect() as (conn, cursor):
                for i in range(0, len(digests), LOOKUP_CHUNK_SIZE):
                    chunk = digests[i:i + LOOKUP_CHUNK_SIZE]
                    markers = ", ".join([self.placeholder] * len(chunk))
                    cursor.execute(
                        f"""
                        SELECT {columns}
                        FROM {self.table}
                        WHERE text_digest IN ({markers})
                          AND source_lang = {self.placeholder}
                          AND target_lang = {self.placeholder}
                          AND options_digest = {self.placeholder}
                        ORDER BY id
                        """,
                        (*chunk, source_lang, target_lang, options_digest)
                    )
                    for row in cursor.fetchall():
                        entry = self._row_to_entry(row)
                        found.setdefault(entry.text_digest, entry)
        except self.driver_errors as e:
            raise StoreError(f"Translation cache lookup failed: {e}") from e

        return found

    def insert(self, entry: CacheEntry) -> None:
        """
        Append a translation to the cache.

        Args:
            entry: The entry to store. Its id is left untouched.

        Raises:
            StoreError: If the database is unreachable or rejects the row.
        """
        columns = _COLUMNS[1:]
        markers = ", ".join([self.placeholder] * len(columns))

        try:
            with self._connect() as (conn, cursor):
                cursor.execute(
                    f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({markers})",
                    (
                        entry.text,
                        entry.text_digest,
                        entry.translated_text,
                        entry.source_lang,
                        entry.target_lang,
                        entry.options,
                        entry.options_digest,
                        entry.detected_source_lang,
                        entry.billed_units,
                        self._format_timestamp(entry.created_at),
                        self._format_timestamp(entry.updated_at),
                    )
                )
        except self.driver_errors as e:
            raise StoreError(f"Could not store translation in cache: {e}") from e

    def stats(self) -> dict:
        """
        Get statistics about the translation cache.

        Returns:
            A dictionary containing:
            - total_entries: Total number of cached translations
            - by_language_pair: Dict mapping (source, target) to count

        Raises:
            StoreError: If the database cannot be queried.
        """
        try:
            with self._connect() as (conn, cursor):
                cursor.execute(f"SELECT COUNT(*) FROM {self.table}")
                total_entries = cursor.fetchone()[0]

                cursor.execute(
                    f"""
                    SELECT source_lang, target_lang, COUNT(*)
                    FROM {self.table}
                    GROUP BY source_lang, target_lang
                    ORDER BY source_lang, target_lang
                    """
                )
                by_language_pair = {
                    (row[0], row[1]): row[2] for row in cursor.fetchall()
                }
        except self.driver_errors as e:
            raise StoreError(f"Could not read cache statistics: {e}") from e

        return {
            "total_entries": total_entries,
            "by_language_pair": by_language_pair,
        }

    def _row_to_entry(self, row: tuple) -> CacheEntry:
        values = dict(zip(_COLUMNS, row))
        return CacheEntry(
            id=values["id"],
            text=values["text"],
            text_digest=values["text_digest"],
            translated_text=values["translated_text"],
            source_lang=values["source_lang"],
            target_lang=values["target_lang"],
            options=values["options"],
            options_digest=values["options_digest"],
            detected_source_lang=values["detected_source_lang"],
            billed_units=values["billed_units"],
            created_at=self._parse_timestamp(values["created_at"]),
            updated_at=self._parse_timestamp(values["updated_at"]),
        )


class SQLiteTranslationCache(TranslationCacheStore):
    """
    Translation cache in a local SQLite file.

    Args:
        db_path: Path of the database file; parent folders are created.
        table: Name of the cache table.

    Example:
        >>> store = SQLiteTranslationCache("/tmp/translations.db")
        >>> store.initialize()
        >>> store.stats()["total_entries"]
        0
    """

    # OSError covers a cache folder that cannot be created.
    driver_errors = (sqlite3.Error, OSError)

    def __init__(self, db_path: str = TRANSLATION_CACHE_PATH, table: str = TRANSLATION_CACHE_TABLE):
        super().__init__(table)
        self.db_path = db_path

    @contextmanager
    def _connect(self):
        with sqlite_connection(self.db_path) as (conn, cursor):
            yield conn, cursor

    def _format_timestamp(self, value: datetime) -> Optional[str]:
        return value.isoformat() if value is not None else None


class PostgresTranslationCache(TranslationCacheStore):
    """
    Translation cache in a PostgreSQL database.

    Args:
        connection_params: Keyword arguments for psycopg2.connect(). Defaults
            to the POSTGRES_* settings.
        table: Name of the cache table.
    """

    placeholder = "%s"
    id_column_ddl = "SERIAL PRIMARY KEY"
    timestamp_ddl = "TIMESTAMP WITH TIME ZONE"
    driver_errors = (psycopg2.Error,)

    def __init__(
        self,
        connection_params: Optional[Dict[str, Any]] = None,
        table: str = TRANSLATION_CACHE_TABLE
    ):
        super().__init__(table)
        self.connection_params = connection_params

    @contextmanager
    def _connect(self):
        with postgres_connection(self.connection_params) as (conn, cursor):
            yield conn, cursor


def create_cache_store(
    backend: str = TRANSLATION_CACHE_BACKEND,
    table: str = TRANSLATION_CACHE_TABLE,
    cache_path: str = TRANSLATION_CACHE_PATH
) -> TranslationCacheStore:
    """
    Build the cache store selected by configuration.

    Args:
        backend: "sqlite" or "postgres".
        table: Name of the cache table.
        cache_path: SQLite file path, ignored for PostgreSQL.

    Returns:
        An uninitialized store; call initialize() before first use.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if backend == "sqlite":
        return SQLiteTranslationCache(cache_path, table=table)
    if backend == "postgres":
        return PostgresTranslationCache(table=table)

    valid_backends: List[str] = ["sqlite", "postgres"]
    raise ValueError(f"backend must be one of {valid_backends}, got '{backend}'")
