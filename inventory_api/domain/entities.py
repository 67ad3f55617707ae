from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional

ID = int


@dataclass
class InventoryData:
    name: str
    description: str
    full_price_thb: int
    count: int
    manufacturer_id: int


@dataclass
class PartialInventoryData:
    """Business fields to change; None means "leave unchanged"."""
    name: Optional[str] = None
    description: Optional[str] = None
    full_price_thb: Optional[int] = None
    count: Optional[int] = None
    manufacturer_id: Optional[int] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass
class Inventory:
    id: ID
    name: str
    description: str
    full_price_thb: int
    count: int
    manufacturer_id: int
    created_at: datetime
    updated_at: datetime

    @property
    def data(self) -> InventoryData:
        return InventoryData(
            name=self.name,
            description=self.description,
            full_price_thb=self.full_price_thb,
            count=self.count,
            manufacturer_id=self.manufacturer_id,
        )


@dataclass
class GetInventoriesFilter:
    """Keyset page request: rows with id > cursor, at most `limit` of them.

    cursor == 0 starts from the beginning; limit == 0 means unbounded.
    """
    cursor: ID = 0
    limit: int = 0


@dataclass
class PaginatedInventories:
    inventories: list[Inventory] = field(default_factory=list)
    cursor: ID = 0
