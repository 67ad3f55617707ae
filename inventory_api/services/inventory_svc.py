from __future__ import annotations

from dataclasses import asdict

from ..db import get_executor
from ..domain.entities import ID, GetInventoriesFilter, Inventory, InventoryData, PaginatedInventories, PartialInventoryData
from ..domain.errors import InventoryError
from ..logs import LogContext
from ..repository import inventory_repo


def create_inventory(data: InventoryData, log: LogContext | None = None) -> ID:
    try:
        with get_executor() as db:
            new_id = inventory_repo.create(db, data)
    except InventoryError as e:
        raise e.with_context("unable to create inventory") from e
    if log is not None:
        log.set_entity("INVENTORY", str(new_id))
        log.set_after({"id": new_id, **asdict(data)})
    return new_id


def get_inventories(flt: GetInventoriesFilter) -> PaginatedInventories:
    try:
        with get_executor() as db:
            return inventory_repo.find(db, flt)
    except InventoryError as e:
        raise e.with_context("unable to get inventories") from e


def get_inventory(id: ID) -> Inventory:
    try:
        with get_executor() as db:
            return inventory_repo.find_by_id(db, id)
    except InventoryError as e:
        raise e.with_context("unable to get inventory") from e


def update_inventory(id: ID, data: PartialInventoryData, log: LogContext | None = None) -> None:
    try:
        with get_executor() as db:
            inventory_repo.update(db, id, data)
    except InventoryError as e:
        raise e.with_context("unable to update inventory") from e
    if log is not None:
        log.set_entity("INVENTORY", str(id))
        log.set_after({k: v for k, v in asdict(data).items() if v is not None})


def delete_inventory(id: ID, log: LogContext | None = None) -> None:
    try:
        with get_executor() as db:
            inventory_repo.delete(db, id)
    except InventoryError as e:
        raise e.with_context("unable to delete inventory") from e
    if log is not None:
        log.set_entity("INVENTORY", str(id))
