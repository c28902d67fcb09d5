"""
Database connection utilities for the translation cache.

This module provides connection management for the two storage engines the
translation cache can run on:
    - SQLite: the default, a single local database file
    - PostgreSQL: a shared cache for several machines or CI runners

Both helpers are context managers that commit on success, roll back on
error and always close the connection.

Usage:
    from localization_translator.core.connections import sqlite_connection

    with sqlite_connection("cache.db") as (conn, cursor):
        cursor.execute("SELECT COUNT(*) FROM translations_cache")

License: MIT
"""

import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Optional

import psycopg2

from localization_translator.config.settings import POSTGRES_CONNECTION_PARAMS


# =============================================================================
# SQLITE CONNECTION UTILITIES
# =============================================================================

@contextmanager
def sqlite_connection(db_path: str):
    """
    Context manager for SQLite database connections.

    The parent directory of db_path is created when missing, so a fresh
    machine can use the default cache location without a setup step.

    Args:
        db_path: The file path to the SQLite database. The database will
            be created if it doesn't exist.

    Yields:
        Tuple[sqlite3.Connection, sqlite3.Cursor]: The connection and a cursor.

    Example:
        >>> with sqlite_connection("cache.db") as (conn, cursor):
        ...     cursor.execute("SELECT * FROM cache WHERE key = ?", (key,))
        ...     result = cursor.fetchone()
    """
    directory = os.path.dirname(os.path.abspath(db_path))
    if db_path != ":memory:" and not os.path.isdir(directory):
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        yield conn, cursor
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()


# =============================================================================
# POSTGRESQL CONNECTION UTILITIES
# =============================================================================

def get_postgres_db_params() -> Dict[str, str]:
    """
    Get PostgreSQL connection parameters as a dictionary.

    Returns:
        dict: Keyword arguments for psycopg2.connect().

    Example:
        >>> params = get_postgres_db_params()
        >>> conn = psycopg2.connect(**params)
    """
    return dict(POSTGRES_CONNECTION_PARAMS)


@contextmanager
def postgres_connection(params: Optional[Dict[str, Any]] = None):
    """
    Context manager for PostgreSQL connections.

    Args:
        params: Keyword arguments for psycopg2.connect(). Defaults to the
            values from get_postgres_db_params().

    Yields:
        Tuple[connection, cursor]: The psycopg2 connection and a cursor.
    """
    conn = psycopg2.connect(**(params or get_postgres_db_params()))
    cursor = conn.cursor()

    try:
        yield conn, cursor
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()
