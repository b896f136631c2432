from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from orderflow.db.models.inventory import Inventory, StockMovement
from orderflow.schemas.common import PageParams
from orderflow.schemas.inventory import InventoryFilters
from .base import BaseRepository


class InventoryRepository(BaseRepository):
    """Repository for inventory rows, always scoped to one company."""

    async def list_inventory(
        self, company_id: UUID, params: PageParams, filters: InventoryFilters
    ) -> Tuple[List[Inventory], int]:
        stmt = (
            select(Inventory)
            .where(Inventory.company_id == company_id)
            .options(selectinload(Inventory.product))
        )
        if filters.type:
            stmt = stmt.where(Inventory.type == filters.type)
        if filters.is_active is not None:
            stmt = stmt.where(Inventory.is_active == filters.is_active)
        if filters.low_stock:
            stmt = stmt.where(Inventory.current_stock < Inventory.min_stock_level)
        stmt = stmt.order_by(Inventory.created_at.desc())
        return await self.paginate(stmt, params)

    async def get_inventory(
        self, company_id: UUID, inventory_id: UUID, *, for_update: bool = False
    ) -> Optional[Inventory]:
        stmt = (
            select(Inventory)
            .where(Inventory.id == inventory_id, Inventory.company_id == company_id)
            .options(selectinload(Inventory.product))
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update(of=Inventory)
        return await self.scalar_one_or_none(stmt)

    async def low_stock(self, company_id: UUID, limit: Optional[int] = None) -> List[Inventory]:
        """Active rows below their minimum level, lowest stock first; all of them unless limit is given."""
        stmt = (
            select(Inventory)
            .where(
                Inventory.company_id == company_id,
                Inventory.is_active.is_(True),
                Inventory.current_stock < Inventory.min_stock_level,
            )
            .order_by(Inventory.current_stock.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(await self.scalars(stmt))

    async def create_inventory(self, company_id: UUID, values: Dict[str, Any]) -> Inventory:
        row = Inventory(company_id=company_id, **values)
        await self.add(row)
        await self.commit()
        return row

    async def update_inventory(self, row: Inventory, values: Dict[str, Any]) -> Inventory:
        for field, value in values.items():
            setattr(row, field, value)
        await self.commit()
        return row

    async def apply_stock_change(self, row: Inventory, movement_type: str, quantity: float) -> bool:
        """
        Apply one guarded stock UPDATE and return whether a row was changed.

        An `out` change only matches while current_stock >= quantity, so stock
        never goes negative even if another writer got in first.
        """
        stmt = update(Inventory).where(
            Inventory.id == row.id, Inventory.company_id == row.company_id
        )
        if movement_type == "in":
            stmt = stmt.values(current_stock=Inventory.current_stock + quantity)
        elif movement_type == "out":
            stmt = stmt.where(Inventory.current_stock >= quantity).values(
                current_stock=Inventory.current_stock - quantity
            )
        else:
            stmt = stmt.values(current_stock=quantity)
        result = await self.session.execute(
            stmt.execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        await self.session.refresh(row, attribute_names=["current_stock", "updated_at"])
        return True


class StockMovementRepository(BaseRepository):
    """Repository for the append-only stock movement log."""

    async def list_movements(
        self, company_id: UUID, inventory_id: UUID, params: PageParams
    ) -> Tuple[List[StockMovement], int]:
        stmt = (
            select(StockMovement)
            .where(
                StockMovement.company_id == company_id,
                StockMovement.inventory_id == inventory_id,
            )
            .options(selectinload(StockMovement.order))
            .order_by(StockMovement.created_at.desc())
        )
        return await self.paginate(stmt, params)

    async def insert_movement(self, movement: StockMovement) -> StockMovement:
        await self.add(movement)
        await self.flush()
        return movement

    async def get_movement(self, company_id: UUID, movement_id: UUID) -> Optional[StockMovement]:
        stmt = (
            select(StockMovement)
            .where(StockMovement.id == movement_id, StockMovement.company_id == company_id)
            .options(selectinload(StockMovement.order))
            .execution_options(populate_existing=True)
        )
        return await self.scalar_one_or_none(stmt)

    async def recent(self, company_id: UUID, limit: int = 5) -> List[StockMovement]:
        stmt = (
            select(StockMovement)
            .where(StockMovement.company_id == company_id)
            .options(selectinload(StockMovement.inventory))
            .order_by(StockMovement.created_at.desc())
            .limit(limit)
        )
        return list(await self.scalars(stmt))
