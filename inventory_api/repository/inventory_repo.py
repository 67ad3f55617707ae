"""
Inventory data access.

Every function takes the executor as its first argument, runs exactly one
statement and classifies store failures into InventoryNotFound / InternalError.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from ..db import Executor
from ..domain.entities import ID, GetInventoriesFilter, Inventory, InventoryData, PaginatedInventories, PartialInventoryData
from ..domain.errors import InventoryNotFound, StoreError, classify_store_error
from .statements import COLUMNS, TABLE, build_list, build_update

logger = logging.getLogger(__name__)


def _row_to_inventory(row: Mapping[str, Any]) -> Inventory:
    return Inventory(
        id=int(row["id"]),
        name=row["name"],
        description=row["description"],
        full_price_thb=int(row["full_price_thb"]),
        count=int(row["count"]),
        manufacturer_id=int(row["manufacturer_id"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create(db: Executor, data: InventoryData) -> ID:
    now = datetime.now(timezone.utc)
    try:
        row = db.query_row(
            f"""
            INSERT INTO {TABLE} (name, description, full_price_thb, manufacturer_id, count, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING id
            """,
            [data.name, data.description, data.full_price_thb, data.manufacturer_id, data.count, now, now],
        )
        return int(row["id"])
    except StoreError as e:
        raise classify_store_error(e, "unable to insert data to database") from e


def update(db: Executor, id: ID, data: PartialInventoryData) -> None:
    stmt = build_update(id, data)
    logger.debug("Update SQL statement=%s params=%s", stmt.sql, stmt.params)
    if data.is_empty():
        # 没有任何字段时不存在 SET 子句，无法直接执行；
        # 以相同的 WHERE 条件探测目标行，结果与“空更新”一致
        _ensure_exists(db, stmt.params[-1])
        return
    try:
        affected = db.execute(stmt.sql, stmt.params)
    except StoreError as e:
        raise classify_store_error(e, "unable to update row") from e
    if affected == 0:
        raise InventoryNotFound()


def _ensure_exists(db: Executor, id: ID) -> None:
    try:
        db.query_row(f"SELECT id FROM {TABLE} WHERE id = $1", [id])
    except StoreError as e:
        raise classify_store_error(e, "unable to update row", allow_not_found=True) from e


def find(db: Executor, flt: GetInventoriesFilter) -> PaginatedInventories:
    stmt = build_list(flt)
    logger.debug("Find SQL statement=%s params=%s", stmt.sql, stmt.params)
    try:
        rows = db.query(stmt.sql, stmt.params)
    except StoreError as e:
        raise classify_store_error(e, "unable to query inventories") from e

    res = PaginatedInventories()
    for row in rows:
        try:
            res.inventories.append(_row_to_inventory(row))
        except (KeyError, TypeError, ValueError) as e:
            raise classify_store_error(e, "unable to scan a row") from e
    if res.inventories:
        res.cursor = res.inventories[-1].id
    return res


def find_by_id(db: Executor, id: ID) -> Inventory:
    try:
        row = db.query_row(f"SELECT {COLUMNS} FROM {TABLE} WHERE id = $1", [id])
        return _row_to_inventory(row)
    except StoreError as e:
        raise classify_store_error(e, "unable to return inventory", allow_not_found=True) from e
    except (KeyError, TypeError, ValueError) as e:
        raise classify_store_error(e, "unable to return inventory") from e


def delete(db: Executor, id: ID) -> None:
    # NOTE: unlike update(), a missing row is not reported; deleting an
    # unknown id succeeds. Kept as is until the intended contract is confirmed.
    try:
        db.execute(f"DELETE FROM {TABLE} WHERE id = $1", [id])
    except StoreError as e:
        raise classify_store_error(e, f"unable to delete inventory with ID {id}") from e
