"""
API route modules.

This package contains subrouters for:
- Auth: signup, login, refresh, and current user
- Companies, products, customers, orders and inventory (with stock movements)
- Reports: dashboard statistics

Routers are included from orderflow.api.main (under the /api/v1 prefix).
"""
