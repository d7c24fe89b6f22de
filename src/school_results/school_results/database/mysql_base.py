from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_float(value: Any) -> Optional[float]:
    """Normalize DECIMAL columns (returned as decimal.Decimal) to float; NULL stays None."""

    if value is None:
        return None
    return float(value)


def placeholders(count: int) -> str:
    """'%s,%s,...' for an IN (...) clause."""

    if count <= 0:
        raise ValueError("IN clause needs at least one value")
    return ",".join(["%s"] * count)
