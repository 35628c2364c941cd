"""Schema bootstrap and the one-time startup migration.

Runs before request handlers and background tasks start, so nothing at
runtime has to check whether the schema is ready.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

LEGACY_UNIQUE_KEY = "attendance_records_employee_id_attendance_date_key"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    ensure_database_exists(conn_factory)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def drop_legacy_unique_key(conn_factory: DatabaseConnection) -> bool:
    """Allow several punches per employee per day (multi-shift / OT punching).

    Returns True when the old one-record-per-day key was found and dropped.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT COUNT(*)
            FROM information_schema.statistics
            WHERE table_schema = DATABASE()
              AND table_name = 'attendance_records'
              AND index_name = %s
            """,
            (LEGACY_UNIQUE_KEY,),
        )
        (count,) = cur.fetchone()
        if not count:
            return False
        cur.execute(f"ALTER TABLE attendance_records DROP INDEX `{LEGACY_UNIQUE_KEY}`")
        conn.commit()
        return True
    finally:
        conn.close()


def run_startup_migrations(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    apply_schema(conn_factory, schema_path=schema_path)
    if drop_legacy_unique_key(conn_factory):
        logger.info("Dropped legacy unique key %s on attendance_records", LEGACY_UNIQUE_KEY)
    logger.info("Database schema ready (%d tables)", len(list_tables(conn_factory)))


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
