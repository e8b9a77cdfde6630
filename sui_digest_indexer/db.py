from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import psycopg

POSTGRES = "postgres"
SQLITE = "sqlite"

SQL_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS transaction_digests (
  tx_digest TEXT PRIMARY KEY,
  checkpoint_sequence_number BIGINT NOT NULL
)
"""


def driver_for(dsn: str) -> str:
    if dsn.startswith(("postgresql://", "postgres://")):
        return POSTGRES
    if dsn.startswith("sqlite://"):
        return SQLITE
    raise ValueError(f"Unsupported DATABASE_URL scheme: {dsn.split('://', 1)[0]!r}")


def _sqlite_path(dsn: str) -> str:
    # sqlite:///relative.db, sqlite:////abs/path.db, sqlite:///:memory:
    path = dsn[len("sqlite://"):]
    if path.startswith("/"):
        path = path[1:]
    return path or ":memory:"


@contextmanager
def connect(dsn: str) -> Iterator[Any]:
    if driver_for(dsn) == POSTGRES:
        conn = psycopg.connect(dsn)
    else:
        conn = sqlite3.connect(_sqlite_path(dsn))
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def execute(conn: Any, sql: str, params: tuple = ()) -> None:
    cur = conn.cursor()
    try:
        cur.execute(sql, params)
    finally:
        cur.close()


def fetchone(conn: Any, sql: str, params: tuple = ()) -> Optional[tuple]:
    cur = conn.cursor()
    try:
        cur.execute(sql, params)
        return cur.fetchone()
    finally:
        cur.close()


def fetchall(conn: Any, sql: str, params: tuple = ()) -> list[tuple]:
    cur = conn.cursor()
    try:
        cur.execute(sql, params)
        return cur.fetchall()
    finally:
        cur.close()


def ensure_schema(conn: Any) -> None:
    execute(conn, SQL_CREATE_TABLE)
    conn.commit()
