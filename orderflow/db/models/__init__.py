"""
ORM models for the tenancy root (companies), the identity store, and the
tenant-scoped catalog, sales and inventory tables.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .security import AppUser  # noqa: F401
from .company import Company  # noqa: F401
from .catalog import Product  # noqa: F401
from .sales import (  # noqa: F401
    Customer,
    Order,
    OrderItem,
)
from .inventory import (  # noqa: F401
    Inventory,
    StockMovement,
    Recipe,
)
