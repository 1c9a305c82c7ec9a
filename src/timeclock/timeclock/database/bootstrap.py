from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# First-run demo employees (id, name, hourly pay rate).
DEMO_EMPLOYEES = (
    (1001, "John Doe", 15.50),
    (1002, "Jane Smith", 18.75),
    (1003, "Robert Johnson", 20.00),
)


def _as_config(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "timeclock_db")),
    )


def _connect(cfg: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=cfg.host, port=cfg.port, user=cfg.user, password=cfg.password, use_pure=True)
    if with_database:
        kwargs["database"] = cfg.database
    return mysql.connector.connect(**kwargs)


def _without_database_statements(sql: str) -> str:
    # schema.sql may name a database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    return re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Split on ';' outside quotes; drop '--' comment lines.
    buf: list[str] = []
    quote = None
    for line in sql.splitlines():
        if quote is None and line.strip().startswith("--"):
            continue
        for ch in line + "\n":
            if quote:
                if ch == quote:
                    quote = None
            elif ch in ("'", '"'):
                quote = ch
            elif ch == ";":
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    cfg = _as_config(db_config)
    conn = _connect(cfg, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{cfg.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create tables (idempotent: CREATE TABLE IF NOT EXISTS)."""
    ensure_database_exists(db_config)
    sql = _without_database_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_config(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied schema %s", schema_path)


def ensure_demo_employees(db_config: dict) -> int:
    """Seed demo employees when the employees table is empty. Returns rows inserted."""
    conn = _connect(_as_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SELECT COUNT(*) FROM employees")
        (count,) = cur.fetchone()
        if count:
            return 0
        cur.executemany(
            "INSERT INTO employees (employee_id, name, pay_rate) VALUES (%s, %s, %s)",
            list(DEMO_EMPLOYEES),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Seeded %d demo employees", len(DEMO_EMPLOYEES))
    return len(DEMO_EMPLOYEES)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
