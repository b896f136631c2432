"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each domain area. Every query is
filtered by the caller's company_id; the session carries no tenant state.
"""
from .base import BaseRepository
from .catalog import ProductRepository
from .company import CompanyRepository
from .inventory import InventoryRepository, StockMovementRepository
from .sales import CustomerRepository, OrderRepository
from .security import IdentityRepository

__all__ = [
    "BaseRepository",
    "CompanyRepository",
    "CustomerRepository",
    "IdentityRepository",
    "InventoryRepository",
    "OrderRepository",
    "ProductRepository",
    "StockMovementRepository",
]
