from __future__ import annotations

# inventory_api/db.py
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Sequence

from .config import get_db_path
from .domain.errors import NoRowsError, StoreError

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schema.sql")


# 时间戳以 ISO-8601 文本存储，读取时还原为带时区的 datetime
def _adapt_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _convert_timestamp(raw: bytes) -> datetime:
    value = datetime.fromisoformat(raw.decode("utf-8"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("TIMESTAMP", _convert_timestamp)


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    获取 SQLite 连接。优先使用显式传入的 db_path，否则走 get_db_path()。
    设置 row_factory 为 Row，时间戳列按声明类型转换。
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        detect_types=sqlite3.PARSE_DECLTYPES,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def bind_numbered(params: Sequence[Any]) -> dict[str, Any]:
    """Map an ordered parameter list onto $1, $2, ... placeholders."""
    return {str(i): p for i, p in enumerate(params, start=1)}


class Executor:
    """Runs parameterized statements written with $n placeholders.

    execute() returns the affected-row count, query() the fetched rows and
    query_row() exactly one row (NoRowsError when there is none). Every
    driver failure is re-raised as StoreError.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def execute(self, statement: str, params: Sequence[Any] = ()) -> int:
        try:
            cur = self.conn.execute(statement, bind_numbered(params))
        except (sqlite3.Error, OverflowError) as e:
            raise StoreError(str(e)) from e
        if cur.rowcount < 0:
            raise StoreError("affected row count unavailable")
        return cur.rowcount

    def query(self, statement: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        try:
            return self.conn.execute(statement, bind_numbered(params)).fetchall()
        except (sqlite3.Error, ValueError, OverflowError) as e:
            raise StoreError(str(e)) from e

    def query_row(self, statement: str, params: Sequence[Any] = ()) -> sqlite3.Row:
        try:
            rows = self.conn.execute(statement, bind_numbered(params)).fetchall()
        except (sqlite3.Error, ValueError, OverflowError) as e:
            raise StoreError(str(e)) from e
        if not rows:
            raise NoRowsError("no rows in result set")
        return rows[0]


@contextmanager
def get_executor(db_path: str | None = None) -> Iterator[Executor]:
    with get_conn(db_path) as conn:
        yield Executor(conn)


def ensure_schema(db_path: str | None = None):
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        ddl = f.read()
    with get_conn(db_path) as conn:
        conn.executescript(ddl)
        conn.commit()
