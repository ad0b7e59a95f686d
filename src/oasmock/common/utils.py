"""
oasmock Common Utilities

Shared helpers for timestamps, JSON output and case-insensitive lookups.
"""

import json
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def dumps_json(value: Any, indent: Optional[int] = 2) -> str:
    """
    Serialize a generated value as a JSON response body.

    Args:
        value: JSON-compatible value (dicts, lists, strings, numbers, None)
        indent: Indentation width, or None for compact output

    Returns:
        JSON text
    """
    return json.dumps(value, indent=indent, ensure_ascii=False)


def get_ignore_case(mapping: Optional[Mapping[str, Any]], key: str) -> Optional[Any]:
    """
    Look up a key ignoring case.

    An exact match wins; otherwise the first key equal under case folding.

    Example:
        get_ignore_case({'ID': '7'}, 'id')  # '7'
    """
    if not mapping:
        return None
    if key in mapping:
        return mapping[key]
    folded = key.casefold()
    for name, value in mapping.items():
        if name.casefold() == folded:
            return value
    return None
