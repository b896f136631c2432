import json

from orderflow.api.generate_openapi import main


def test_openapi_export(tmp_path) -> None:
    path = main(str(tmp_path / "interfaces"))
    with open(path) as f:
        schema = json.load(f)
    paths = schema["paths"]
    for expected in (
        "/api/v1/health",
        "/api/v1/auth/signup",
        "/api/v1/auth/login",
        "/api/v1/orders",
        "/api/v1/orders/{order_id}",
        "/api/v1/inventory/{inventory_id}/movements",
        "/api/v1/reports/dashboard",
    ):
        assert expected in paths
