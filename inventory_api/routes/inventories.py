from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Path, Query, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..domain.entities import GetInventoriesFilter, Inventory, InventoryData, PartialInventoryData
from ..domain.errors import InventoryError, InventoryNotFound
from ..logs import LogContext
from ..services.inventory_svc import (
    create_inventory,
    delete_inventory,
    get_inventories,
    get_inventory,
    update_inventory,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# 存储层为有符号 64 位整数
MAX_UINT = 2**63 - 1


class InventoryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    description: str = ""
    full_price_thb: int = Field(0, alias="fullPriceTHB", ge=0, le=MAX_UINT)
    count: int = Field(0, ge=0, le=MAX_UINT)
    manufacturer_id: int = Field(0, alias="manufacturerId", ge=0, le=MAX_UINT)


class InventoryPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    full_price_thb: Optional[int] = Field(None, alias="fullPriceTHB", ge=0, le=MAX_UINT)
    count: Optional[int] = Field(None, ge=0, le=MAX_UINT)
    manufacturer_id: Optional[int] = Field(None, alias="manufacturerId", ge=0, le=MAX_UINT)


class InventoryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str
    full_price_thb: int = Field(alias="fullPriceTHB")
    count: int
    manufacturer_id: int = Field(alias="manufacturerId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_entity(cls, inv: Inventory) -> "InventoryOut":
        return cls(
            id=inv.id,
            name=inv.name,
            description=inv.description,
            full_price_thb=inv.full_price_thb,
            count=inv.count,
            manufacturer_id=inv.manufacturer_id,
            created_at=inv.created_at,
            updated_at=inv.updated_at,
        )


class InventoryPage(BaseModel):
    inventories: list[InventoryOut]
    cursor: int


class CreatedId(BaseModel):
    id: int


def _error_response(err: Exception) -> JSONResponse:
    if isinstance(err, InventoryNotFound):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(err)})
    # 内部细节只写日志，不返回给调用方
    logger.error("Internal Server Error: %s", err, exc_info=not isinstance(err, InventoryError))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "internal server error"})


def _write_log(log: LogContext, result: str, err: str | None = None):
    # 操作日志写入失败不能改变接口的响应
    try:
        log.write(result, err)
    except Exception:
        logger.exception("unable to write operation log for %s", log.action)


@router.post("/inventories", response_model=CreatedId)
def api_inventory_create(body: InventoryCreate):
    log = LogContext("INVENTORY_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = create_inventory(InventoryData(**body.model_dump()), log)
    except Exception as e:
        _write_log(log, "ERROR", str(e))
        return _error_response(e)
    _write_log(log, "OK")
    return CreatedId(id=new_id)


@router.get("/inventories", response_model=InventoryPage)
def api_inventory_list(
    cursor: int = Query(0, ge=0, le=MAX_UINT),
    limit: int = Query(0, ge=0, le=MAX_UINT),
):
    try:
        page = get_inventories(GetInventoriesFilter(cursor=cursor, limit=limit))
    except Exception as e:
        return _error_response(e)
    return InventoryPage(
        inventories=[InventoryOut.from_entity(inv) for inv in page.inventories],
        cursor=page.cursor,
    )


@router.get("/inventories/{id}", response_model=InventoryOut)
def api_inventory_get(id: int = Path(..., ge=0, le=MAX_UINT)):
    try:
        inv = get_inventory(id)
    except Exception as e:
        return _error_response(e)
    return InventoryOut.from_entity(inv)


@router.patch("/inventories/{id}", status_code=status.HTTP_204_NO_CONTENT)
def api_inventory_update(body: InventoryPatch, id: int = Path(..., ge=0, le=MAX_UINT)):
    log = LogContext("INVENTORY_UPDATE")
    log.set_payload(body.model_dump(exclude_none=True))
    try:
        update_inventory(id, PartialInventoryData(**body.model_dump()), log)
    except Exception as e:
        log.set_entity("INVENTORY", str(id))
        _write_log(log, "ERROR", str(e))
        return _error_response(e)
    _write_log(log, "OK")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/inventories/{id}", status_code=status.HTTP_204_NO_CONTENT)
def api_inventory_delete(id: int = Path(..., ge=0, le=MAX_UINT)):
    log = LogContext("INVENTORY_DELETE")
    try:
        delete_inventory(id, log)
    except Exception as e:
        log.set_entity("INVENTORY", str(id))
        _write_log(log, "ERROR", str(e))
        return _error_response(e)
    _write_log(log, "OK")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
