from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.errors import InsufficientStock, NotFound
from orderflow.db.models.inventory import StockMovement
from orderflow.repositories.inventory import InventoryRepository, StockMovementRepository
from orderflow.repositories.sales import OrderRepository
from orderflow.schemas.inventory import StockMovementCreate
from orderflow.services.base import BaseService

logger = logging.getLogger(__name__)


class StockMovementService(BaseService):
    """
    Records stock movements.

    The stock update and the movement insert share one transaction, and the
    inventory row stays locked until it commits.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.inventory = InventoryRepository(session)
        self.movements = StockMovementRepository(session)
        self.orders = OrderRepository(session)

    # PUBLIC_INTERFACE
    async def record_movement(
        self, company_id: UUID, inventory_id: UUID, payload: StockMovementCreate
    ) -> StockMovement:
        """
        Apply a movement to an inventory row and append it to the history.

        Parameters:
            company_id: caller's company
            inventory_id: row to move stock on
            payload: movement type, quantity and metadata
        Returns:
            The stored movement, with its originating order loaded.
        Raises:
            NotFound: the inventory row or the referenced order is not the company's.
            InsufficientStock: an `out` movement exceeds the current stock.
        """
        try:
            row = await self.inventory.get_inventory(company_id, inventory_id, for_update=True)
            if row is None:
                raise NotFound("Inventory item not found")
            if payload.order_id is not None and await self.orders.get_order(company_id, payload.order_id) is None:
                raise NotFound("Order not found")

            quantity = float(payload.quantity)
            if payload.type == "out" and float(row.current_stock) < quantity:
                raise InsufficientStock(
                    details=f"Available: {float(row.current_stock):g}, requested: {quantity:g}"
                )
            if not await self.inventory.apply_stock_change(row, payload.type, quantity):
                raise InsufficientStock()

            movement = await self.movements.insert_movement(
                StockMovement(
                    company_id=company_id,
                    inventory_id=row.id,
                    order_id=payload.order_id,
                    type=payload.type,
                    quantity=quantity,
                    unit_cost=payload.unit_cost if payload.unit_cost is not None else row.cost_per_unit,
                    reference=payload.reference,
                    reason=payload.reason,
                    notes=payload.notes,
                )
            )
            await self.movements.commit()
        except InsufficientStock:
            await self.movements.rollback()
            logger.warning("Rejected %s of %s on inventory %s: insufficient stock", payload.type, payload.quantity, inventory_id)
            raise
        except Exception:
            await self.movements.rollback()
            raise

        logger.info(
            "Recorded %s movement of %s on inventory %s (stock now %s)",
            payload.type,
            payload.quantity,
            inventory_id,
            row.current_stock,
        )
        stored = await self.movements.get_movement(company_id, movement.id)
        if stored is None:
            raise NotFound("Stock movement not found")
        return stored
