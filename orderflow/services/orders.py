from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.errors import BusinessRuleViolation, NotFound
from orderflow.db.models.sales import Order, OrderItem
from orderflow.repositories.catalog import ProductRepository
from orderflow.repositories.sales import CustomerRepository, OrderRepository
from orderflow.schemas.common import update_values
from orderflow.schemas.order import OrderCreate, OrderUpdate
from orderflow.services.base import BaseService
from orderflow.services.order_status import UNDELETABLE_STATUSES, ensure_transition

logger = logging.getLogger(__name__)


def generate_order_number(now: Optional[datetime] = None) -> str:
    """Return ORD-YYYYMMDD-XXXXXXXX using the UTC date and 8 random hex digits."""
    now = now or datetime.now(tz=timezone.utc)
    return f"ORD-{now:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


class OrderService(BaseService):
    """
    Order workflows.

    Creation writes the header, the lines and the recomputed totals in one
    transaction. A failure at any step (unknown product, constraint violation)
    rolls the whole order back.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.orders = OrderRepository(session)
        self.customers = CustomerRepository(session)
        self.products = ProductRepository(session)

    # PUBLIC_INTERFACE
    async def create_order(self, company_id: UUID, payload: OrderCreate) -> Order:
        """
        Create an order with its lines for a customer of the company.

        Raises:
            NotFound: the customer or one of the products is not the company's.
        """
        customer = await self.customers.get_customer(company_id, payload.customer_id)
        if customer is None:
            raise NotFound("Customer not found")

        header = payload.model_dump(exclude={"items", "order_date"})
        if payload.order_date is not None:
            header["order_date"] = payload.order_date
        order = Order(
            company_id=company_id,
            order_number=generate_order_number(),
            status="draft",
            **header,
        )
        try:
            await self.orders.insert_header(order)
            await self._insert_items(company_id, order, payload)
            await self.orders.recalculate_totals(order)
            await self.orders.commit()
        except Exception:
            await self.orders.rollback()
            logger.warning("Order creation rolled back for customer %s", payload.customer_id)
            raise

        logger.info("Created order %s (%s items, total %.2f)", order.order_number, len(payload.items), order.total)
        created = await self.orders.get_order_detail(company_id, order.id)
        if created is None:
            raise NotFound("Order not found")
        return created

    async def _insert_items(self, company_id: UUID, order: Order, payload: OrderCreate) -> None:
        product_ids = [item.product_id for item in payload.items]
        owned = await self.products.get_products(company_id, product_ids)
        missing = [str(pid) for pid in product_ids if pid not in owned]
        if missing:
            raise NotFound("Product not found", details=", ".join(sorted(set(missing))))
        await self.orders.insert_items(
            [
                OrderItem(
                    order_id=order.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                    line_total=item.line_total,
                    customizations=item.customizations,
                    notes=item.notes,
                )
                for item in payload.items
            ]
        )

    # PUBLIC_INTERFACE
    async def update_order(self, company_id: UUID, order_id: UUID, payload: OrderUpdate) -> Order:
        """
        Apply a partial header update.

        Status changes follow the order lifecycle; a new customer must belong to
        the company; totals are recomputed when discount or tax rate change.
        """
        order = await self.orders.get_order(company_id, order_id)
        if order is None:
            raise NotFound("Order not found")

        values = update_values(payload, nullable=("due_date", "delivery_date", "delivery_address"))
        if "status" in values:
            ensure_transition(order.status, values["status"])
        if "customer_id" in values:
            if await self.customers.get_customer(company_id, values["customer_id"]) is None:
                raise NotFound("Customer not found")

        previous_status = order.status
        try:
            for field, value in values.items():
                setattr(order, field, value)
            if "discount" in values or "tax_rate" in values:
                await self.orders.recalculate_totals(order)
            await self.orders.commit()
        except Exception:
            await self.orders.rollback()
            raise

        if order.status != previous_status:
            logger.info("Order %s moved from %s to %s", order.order_number, previous_status, order.status)
        updated = await self.orders.get_order_detail(company_id, order_id)
        if updated is None:
            raise NotFound("Order not found")
        return updated

    # PUBLIC_INTERFACE
    async def delete_order(self, company_id: UUID, order_id: UUID) -> None:
        """Delete an order and its lines unless it is completed or delivered."""
        order = await self.orders.get_order(company_id, order_id)
        if order is None:
            raise NotFound("Order not found")
        if order.status in UNDELETABLE_STATUSES:
            raise BusinessRuleViolation(f"Cannot delete a {order.status} order")
        await self.orders.delete_order(order)
        logger.info("Deleted order %s", order.order_number)
