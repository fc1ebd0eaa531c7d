"""Read-only access to the three importer-owned SQLite databases."""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

import packages.config as config

logger = logging.getLogger("lifelog.sources")

SOURCES = ("applehealth", "footprint", "pixiu")


class UnknownSourceError(KeyError):
    pass


def source_path(source: str) -> Path:
    paths = {
        "applehealth": config.APPLEHEALTH_DB_PATH,
        "footprint": config.FOOTPRINT_DB_PATH,
        "pixiu": config.PIXIU_DB_PATH,
    }
    try:
        return Path(paths[source])
    except KeyError:
        raise UnknownSourceError(source) from None


def source_exists(source: str) -> bool:
    return source_path(source).exists()


def source_version(source: str) -> Optional[str]:
    """Identity of the database file on disk; changes whenever an importer rewrites it."""
    path = source_path(source)
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None
    return f"{path}:{stat.st_mtime_ns}:{stat.st_size}"


@contextmanager
def connect(source: str) -> Iterator[sqlite3.Connection]:
    path = source_path(source).resolve()
    conn = sqlite3.connect(f"{path.as_uri()}?mode=ro", uri=True, check_same_thread=False)
    try:
        conn.execute("PRAGMA busy_timeout=5000")
        yield conn
    finally:
        conn.close()


def dict_rows(cursor) -> Iterable[Dict[str, Any]]:
    cols = [c[0] for c in cursor.description]
    for row in cursor.fetchall():
        yield {cols[i]: row[i] for i in range(len(cols))}


def fetch_all(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    cur = conn.execute(sql, tuple(params))
    return list(dict_rows(cur))


def fetch_one(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
    rows = fetch_all(conn, sql, params)
    return rows[0] if rows else None


REQUIRED_TABLES = {
    "applehealth": ("apple_record", "apple_workout", "apple_activity_summary"),
    "footprint": ("track_point", "track_day_agg", "track_month_agg", "track_year_agg"),
    "pixiu": ("pixiu_transaction", "pixiu_day_agg", "pixiu_month_agg", "pixiu_year_agg"),
}


def check_source(source: str) -> List[str]:
    """Problems found in one source database; an empty list means it is usable."""
    if not source_exists(source):
        return [f"{source}: database file not found at {source_path(source)}"]
    problems = []
    with connect(source) as conn:
        integrity = conn.execute("PRAGMA integrity_check").fetchone()
        if integrity and integrity[0] != "ok":
            problems.append(f"{source}: integrity check failed: {integrity[0]}")
        present = {row["name"] for row in fetch_all(conn, "SELECT name FROM sqlite_master WHERE type = 'table'")}
    for table in REQUIRED_TABLES[source]:
        if table not in present:
            problems.append(f"{source}: missing table {table}")
    return problems
