"""
oasmock Common Utilities

Shared utilities and helpers used across oasmock modules.
"""

from .utils import utc_timestamp, dumps_json, get_ignore_case
from .url_utils import PathUtils

__all__ = [
    'utc_timestamp',
    'dumps_json',
    'get_ignore_case',
    'PathUtils'
]
