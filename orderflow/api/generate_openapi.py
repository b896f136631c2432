"""
Write the OpenAPI document of the service to interfaces/openapi.json.

Usage:
    python -m orderflow.api.generate_openapi [output_dir]
"""
import json
import os
import sys
from typing import Any, Dict, Optional

from orderflow.api.main import create_app


# PUBLIC_INTERFACE
def build_openapi() -> Dict[str, Any]:
    """Return the OpenAPI schema (all REST routes are under /api/v1)."""
    return create_app().openapi()


# PUBLIC_INTERFACE
def main(output_dir: Optional[str] = None) -> str:
    """Write openapi.json into output_dir (default: interfaces) and return its path."""
    output_dir = output_dir or (sys.argv[1] if len(sys.argv) > 1 else "interfaces")
    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, "openapi.json")
    with open(output_path, "w") as f:
        json.dump(build_openapi(), f, indent=2)
    return output_path


if __name__ == "__main__":
    main()
