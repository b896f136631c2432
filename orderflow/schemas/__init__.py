"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by resource (products, customers, orders, inventory) and also
include common reusable models such as pagination and the error envelope.
"""

from .common import ErrorResponse, MessageResponse, Page, PageParams  # noqa: F401
