"""
Database seeding utilities for a demo company.

Seeds (idempotently, keyed on the demo account email):
- Demo account demo@orderflow.com / demo1234 and its company
- A few products, customers and inventory rows (one below its minimum level)

Usage:
  python -m orderflow.db.run_migrations upgrade head
  python -m orderflow.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.security import get_password_hash
from orderflow.db.models.catalog import Product
from orderflow.db.models.inventory import Inventory
from orderflow.db.models.sales import Customer
from orderflow.db.session import Database
from orderflow.repositories.company import CompanyRepository
from orderflow.repositories.security import IdentityRepository

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@orderflow.com"
DEMO_PASSWORD = "demo1234"


# PUBLIC_INTERFACE
async def seed_all(db: Optional[Database] = None) -> bool:
    """
    Seed the demo company.

    Returns:
        True when data was inserted, False when the demo account already existed.
    """
    db = db or Database()
    async with db.session() as session:
        users = IdentityRepository(session)
        if await users.get_user_by_email(DEMO_EMAIL):
            logger.info("Demo account already present; skipping seed")
            return False
        user = await users.create_user(email=DEMO_EMAIL, hashed_password=get_password_hash(DEMO_PASSWORD))
        company = await CompanyRepository(session).create_company(
            user_id=user.id,
            values={
                "name": "Atelier Démo",
                "email": DEMO_EMAIL,
                "business_type": "custom_orders",
                "inventory_management": True,
                "inventory_type": "finished_products",
            },
        )
        await _seed_catalog(session, company.id)
        await session.commit()
    logger.info("Seeded demo company %s", company.id)
    return True


async def _seed_catalog(session: AsyncSession, company_id) -> None:
    cake = Product(
        company_id=company_id,
        name="Gâteau d'anniversaire",
        description="Custom birthday cake",
        price=45.0,
        sku="CAKE-001",
        unit="piece",
        category="cakes",
        attributes={"serves": 8},
        track_inventory=True,
        stock_quantity=5,
        min_stock_level=2,
    )
    cookies = Product(
        company_id=company_id,
        name="Cookies",
        description="Box of 12 cookies",
        price=12.5,
        sku="COOK-012",
        category="biscuits",
    )
    session.add_all([cake, cookies])
    await session.flush()

    session.add_all(
        [
            Customer(
                company_id=company_id,
                name="Marie Dupont",
                email="marie.dupont@example.com",
                phone="+33 6 12 34 56 78",
                city="Paris",
                postal_code="75001",
            ),
            Customer(
                company_id=company_id,
                name="Café du Coin",
                email="contact@cafeducoin.example.com",
                city="Lyon",
                postal_code="69002",
            ),
            Inventory(
                company_id=company_id,
                product_id=cake.id,
                name="Gâteau d'anniversaire",
                type="finished_product",
                unit="piece",
                current_stock=5,
                min_stock_level=2,
                cost_per_unit=18.0,
            ),
            Inventory(
                company_id=company_id,
                name="Farine T55",
                type="raw_material",
                unit="kg",
                current_stock=3,
                min_stock_level=10,
                cost_per_unit=1.2,
                supplier="Moulin de Paris",
            ),
        ]
    )
    await session.flush()


# PUBLIC_INTERFACE
def main() -> None:
    """Entrypoint to run the asynchronous seeding."""
    from orderflow.core.logging import configure_logging

    configure_logging()
    asyncio.run(_run())


async def _run() -> None:
    db = Database()
    try:
        await seed_all(db)
    finally:
        await db.dispose()


if __name__ == "__main__":
    main()
