"""
Domain services.

Services orchestrate multi-step workflows (signup, order creation, stock movements,
dashboard aggregation) over one AsyncSession, delegating queries to repositories.
"""
