"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with request/company context
- The error taxonomy and the FastAPI dependencies (auth gate, pagination)
"""
