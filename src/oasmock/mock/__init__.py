"""
oasmock Mock Server Module

Mock HTTP server functionality for serving responses generated from an
OpenAPI document.

This module provides:
- FastAPI-based mock server
- Path template matching engine
- Schema-driven response generation
"""

from .server import (
    MockServer,
    MockConfig,
    MockMetrics,
    MockResponder,
    MockResponse,
    create_mock_server
)
from .matcher import OperationMatcher, MatchResult
from .generator import SchemaGenerator, coerce_id, MAX_DEPTH

__all__ = [
    # Server
    'MockServer',
    'MockConfig',
    'MockMetrics',
    'MockResponder',
    'MockResponse',
    'create_mock_server',

    # Matcher
    'OperationMatcher',
    'MatchResult',

    # Generator
    'SchemaGenerator',
    'coerce_id',
    'MAX_DEPTH',
]

__version__ = '1.0.0'
