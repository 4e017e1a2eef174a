"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

Usage:
    python -m todolist.generate_openapi [OUTPUT_DIR]

OUTPUT_DIR defaults to ./interfaces; the schema is written to OUTPUT_DIR/openapi.json.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .main import app, openapi_tags

logger = logging.getLogger(__name__)


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains the tags metadata declared by the app
    without overriding tag definitions already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def generate_openapi(out_dir: Optional[str] = None) -> str:
    """Write the OpenAPI schema to <out_dir>/openapi.json and return the written path."""
    schema = app.openapi()
    _ensure_tags(schema)

    out_dir = out_dir or os.path.join(os.getcwd(), "interfaces")
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, "openapi.json")

    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info("Wrote OpenAPI schema to %s", out_path)
    return out_path


def main() -> None:
    path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
