from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from orderflow.db.models.sales import Customer, Order, OrderItem
from orderflow.schemas.common import PageParams
from orderflow.schemas.customer import CustomerCreate
from orderflow.schemas.order import OrderFilters
from .base import BaseRepository


class CustomerRepository(BaseRepository):
    """Repository for customers, always scoped to one company."""

    async def list_customers(
        self, company_id: UUID, params: PageParams, *, search: Optional[str] = None
    ) -> Tuple[List[Customer], int]:
        stmt = select(Customer).where(Customer.company_id == company_id)
        if search:
            like = f"%{search}%"
            stmt = stmt.where(or_(Customer.name.ilike(like), Customer.email.ilike(like)))
        stmt = stmt.order_by(Customer.created_at.desc())
        return await self.paginate(stmt, params)

    async def get_customer(
        self, company_id: UUID, customer_id: UUID, *, with_orders: bool = False
    ) -> Optional[Customer]:
        stmt = select(Customer).where(
            Customer.id == customer_id, Customer.company_id == company_id
        )
        if with_orders:
            stmt = stmt.options(selectinload(Customer.orders))
        return await self.scalar_one_or_none(stmt)

    async def has_orders(self, customer_id: UUID) -> bool:
        stmt = select(Order.id).where(Order.customer_id == customer_id).limit(1)
        return await self.scalar_one_or_none(stmt) is not None

    async def create_customer(self, company_id: UUID, payload: CustomerCreate) -> Customer:
        row = Customer(company_id=company_id, **payload.model_dump())
        await self.add(row)
        await self.commit()
        return row

    async def update_customer(self, customer: Customer, values: Dict[str, Any]) -> Customer:
        for field, value in values.items():
            setattr(customer, field, value)
        await self.commit()
        return customer

    async def delete_customer(self, customer: Customer) -> None:
        await self.delete(customer)
        await self.commit()


class OrderRepository(BaseRepository):
    """
    Repository for orders and their lines.

    Reads that return an order to the API eagerly load the customer and, for the
    detail view, the lines with their products; lazy loads are not available
    under AsyncSession.
    """

    async def list_orders(
        self, company_id: UUID, params: PageParams, filters: OrderFilters
    ) -> Tuple[List[Order], int]:
        stmt = (
            select(Order)
            .where(Order.company_id == company_id)
            .options(selectinload(Order.customer))
        )
        if filters.status:
            stmt = stmt.where(Order.status == filters.status)
        if filters.customer_id:
            stmt = stmt.where(Order.customer_id == filters.customer_id)
        if filters.date_from:
            stmt = stmt.where(Order.order_date >= filters.date_from)
        if filters.date_to:
            stmt = stmt.where(Order.order_date <= filters.date_to)
        stmt = stmt.order_by(Order.created_at.desc())
        return await self.paginate(stmt, params)

    async def get_order(self, company_id: UUID, order_id: UUID) -> Optional[Order]:
        """Fetch the header only."""
        stmt = select(Order).where(Order.id == order_id, Order.company_id == company_id)
        return await self.scalar_one_or_none(stmt)

    async def get_order_detail(self, company_id: UUID, order_id: UUID) -> Optional[Order]:
        """Fetch the order with customer and lines (each with its product)."""
        stmt = (
            select(Order)
            .where(Order.id == order_id, Order.company_id == company_id)
            .options(
                selectinload(Order.customer),
                selectinload(Order.items).selectinload(OrderItem.product),
            )
            .execution_options(populate_existing=True)
        )
        return await self.scalar_one_or_none(stmt)

    async def insert_header(self, order: Order) -> Order:
        await self.add(order)
        await self.flush()
        return order

    async def insert_items(self, items: List[OrderItem]) -> None:
        await self.add_all(items)
        await self.flush()

    async def line_totals(self, order_id: UUID) -> List[float]:
        stmt = select(OrderItem.line_total).where(OrderItem.order_id == order_id)
        return [float(v) for v in await self.scalars(stmt)]

    async def recalculate_totals(self, order: Order) -> Order:
        """Recompute subtotal, tax and total from the persisted lines."""
        subtotal = round(sum(await self.line_totals(order.id)), 2)
        discount = float(order.discount or 0)
        tax_rate = float(order.tax_rate or 0)
        order.subtotal = subtotal
        order.tax_amount = round((subtotal - discount) * tax_rate / 100, 2)
        order.total = round(subtotal - discount + order.tax_amount, 2)
        await self.flush()
        return order

    async def delete_order(self, order: Order) -> None:
        # Loading the lines lets the ORM cascade remove them on backends
        # without enforced foreign keys.
        await self.session.refresh(order, attribute_names=["items"])
        await self.delete(order)
        await self.commit()
