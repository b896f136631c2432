"""HTTP layer: application factory and OpenAPI export."""
