from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_, select

from orderflow.db.models.catalog import Product
from orderflow.schemas.common import PageParams
from orderflow.schemas.product import ProductCreate
from .base import BaseRepository


class ProductRepository(BaseRepository):
    """Repository for products, always scoped to one company."""

    async def list_products(
        self,
        company_id: UUID,
        params: PageParams,
        *,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        track_inventory: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Product], int]:
        stmt = select(Product).where(Product.company_id == company_id)
        if category:
            stmt = stmt.where(Product.category == category)
        if is_active is not None:
            stmt = stmt.where(Product.is_active == is_active)
        if track_inventory is not None:
            stmt = stmt.where(Product.track_inventory == track_inventory)
        if search:
            like = f"%{search}%"
            stmt = stmt.where(or_(Product.name.ilike(like), Product.sku.ilike(like)))
        stmt = stmt.order_by(Product.created_at.desc())
        return await self.paginate(stmt, params)

    async def get_product(self, company_id: UUID, product_id: UUID) -> Optional[Product]:
        stmt = select(Product).where(Product.id == product_id, Product.company_id == company_id)
        return await self.scalar_one_or_none(stmt)

    async def get_products(self, company_id: UUID, product_ids: List[UUID]) -> Dict[UUID, Product]:
        """Return the subset of product_ids owned by the company, keyed by id."""
        if not product_ids:
            return {}
        stmt = select(Product).where(
            Product.company_id == company_id, Product.id.in_(list(set(product_ids)))
        )
        return {p.id: p for p in await self.scalars(stmt)}

    async def create_product(self, company_id: UUID, payload: ProductCreate) -> Product:
        row = Product(company_id=company_id, **payload.model_dump())
        await self.add(row)
        await self.commit()
        return row

    async def update_product(self, product: Product, values: Dict[str, Any]) -> Product:
        for field, value in values.items():
            setattr(product, field, value)
        await self.commit()
        return product

    async def delete_product(self, product: Product) -> None:
        await self.delete(product)
        await self.commit()
