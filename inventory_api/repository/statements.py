"""Dynamic SQL for the inventories table.

Both builders are pure: each call owns a fresh placeholder Counter and returns
the statement text plus its ordered parameter list.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional

from ..domain.counter import Counter
from ..domain.entities import ID, GetInventoriesFilter, PartialInventoryData

TABLE = "inventories"
COLUMNS = "id, name, description, full_price_thb, manufacturer_id, count, created_at, updated_at"

# SET 子句的字段顺序固定，保证生成的 SQL 可预测
# 列名与 PartialInventoryData 的属性名一致
UPDATE_COLUMNS: tuple[str, ...] = (
    "count",
    "description",
    "full_price_thb",
    "manufacturer_id",
    "name",
)


class Statement(NamedTuple):
    sql: str
    params: list[Any]


def build_update(id: ID, data: PartialInventoryData, now: Optional[datetime] = None) -> Statement:
    numbers = Counter()
    assignments: list[str] = []
    params: list[Any] = []
    for column in UPDATE_COLUMNS:
        value = getattr(data, column)
        if value is None:
            continue
        assignments.append(f"{column} = {numbers.next_placeholder()}")
        params.append(value)

    if assignments:
        assignments.append(f"updated_at = {numbers.next_placeholder()}")
        params.append(now or datetime.now(timezone.utc))

    sql = f"UPDATE {TABLE}"
    if assignments:
        sql += " SET " + ", ".join(assignments)
    sql += f" WHERE id = {numbers.next_placeholder()}"
    params.append(id)
    return Statement(sql, params)


def build_list(flt: GetInventoriesFilter) -> Statement:
    numbers = Counter()
    where: list[str] = []
    params: list[Any] = []
    if flt.cursor > 0:
        where.append(f"id > {numbers.next_placeholder()}")
        params.append(flt.cursor)

    sql = f"SELECT {COLUMNS} FROM {TABLE}"
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY id"

    if flt.limit > 0:
        sql += f" LIMIT {numbers.next_placeholder()}"
        params.append(flt.limit)
    return Statement(sql, params)
