"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

This script builds the FastAPI application and serializes its OpenAPI schema
to interfaces/openapi.json so that API clients and documentation tools can
consume a stable contract without running the server.

Usage:
    python -m taskflow_api.generate_openapi [OUTPUT_PATH]

Notes:
- The app is built over an in-memory repository and a throwaway data
  directory, so generating the schema never touches real task data.
- Default output path is relative to the repository root: interfaces/openapi.json
"""
from __future__ import annotations

import json
import os
import sys
import tempfile
from typing import Any, Dict, List, Optional

from .main import create_app, openapi_tags
from .settings import Settings


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains the expected tags metadata. Existing
    tag definitions are kept; missing ones are appended.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


def _default_output_path() -> str:
    package_dir = os.path.dirname(os.path.abspath(__file__))  # .../src/taskflow_api
    repo_root = os.path.dirname(os.path.dirname(package_dir))
    return os.path.join(repo_root, "interfaces", "openapi.json")


def build_schema() -> Dict[str, Any]:
    with tempfile.TemporaryDirectory() as tmp:
        settings = Settings(
            persistence_backend="memory",
            quotes_file_path=os.path.join(tmp, "quotes.json"),
            static_dir=None,
        )
        schema = create_app(settings).openapi()
    _ensure_tags(schema)
    return schema


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Generate the OpenAPI schema file and return the written file path."""
    path = out_path or _default_output_path()
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_schema(), f, indent=2, ensure_ascii=False)
    return path


def main() -> None:
    path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
