"""Schema setup for the reconciliation tables.

``schema.sql`` holds only ``CREATE TABLE IF NOT EXISTS`` statements (plus a
``CREATE DATABASE``/``USE`` header for manual use), so applying it again is harmless.
"""

from __future__ import annotations

import re
from pathlib import Path

import mysql.connector

from .connection import DBConfig

REQUIRED_TABLES = ("shifts", "timesheets", "attendance_ledger", "alerts")

_COMMENT = re.compile(r"(?m)^\s*--.*$")
_DATABASE_HEADER = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def schema_statements(sql: str) -> list[str]:
    """Table statements of ``schema.sql``; the database comes from ``DB_CONFIG`` instead."""
    statements = []
    for chunk in _COMMENT.sub("", sql).split(";"):
        stmt = chunk.strip()
        if stmt and not _DATABASE_HEADER.match(stmt):
            statements.append(stmt)
    return statements


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        cur.execute(f"USE `{target.database}`")
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def missing_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        present = {row[0] for row in cur.fetchall()}
    finally:
        conn.close()
    return [name for name in REQUIRED_TABLES if name not in present]
