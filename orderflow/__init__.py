"""OrderFlow: multi-tenant order management API."""
