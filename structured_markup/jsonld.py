"""
JSON-LD scanner: <script type="application/ld+json"> blocks.

Top-level arrays are flattened, and so is a top-level @graph.  A block that
isn't valid JSON is logged and skipped; the others are still returned.
"""

import json
from typing import Any, Optional

from bs4 import BeautifulSoup

from .dom import get_attr, select
from .logger import get_module_logger

logger = get_module_logger("jsonld")


def scan_jsonld(soup: BeautifulSoup, warnings: Optional[list] = None) -> list[dict[str, Any]]:
    """
    Parse every JSON-LD block in document order.

    Args:
        soup: Parsed document
        warnings: Optional list that receives a message per skipped block
    """
    objects: list[dict[str, Any]] = []

    for script in select(soup, "script[type]"):
        script_type = get_attr(script, "type").split(";")[0].strip().lower()
        if script_type != "application/ld+json":
            continue

        text = (script.string or "").strip()
        if not text:
            continue

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON-LD block skipped: {e}")
            if warnings is not None:
                warnings.append(f"Invalid JSON-LD: {e}")
            continue

        for obj in data if isinstance(data, list) else [data]:
            if not isinstance(obj, dict):
                continue
            graph = obj.get("@graph")
            if isinstance(graph, list):
                objects.extend(node for node in graph if isinstance(node, dict))
            else:
                objects.append(obj)

    return objects
