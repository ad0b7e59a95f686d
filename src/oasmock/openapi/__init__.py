"""
oasmock OpenAPI Module

Loading and modelling of OpenAPI documents.

This module provides:
- Immutable document model (paths, operations, responses, schemas)
- Tagged schema variants used by the mock generator
- Document loader for JSON and YAML files
"""

from .model import (
    Document,
    PathItem,
    Operation,
    Response,
    Schema,
    ObjectSchema,
    RefSchema,
    ArraySchema,
    PrimitiveSchema,
    LoadDiagnostic,
)
from .loader import DocumentLoader, load_document, ref_name

__all__ = [
    # Model
    'Document',
    'PathItem',
    'Operation',
    'Response',
    'Schema',
    'ObjectSchema',
    'RefSchema',
    'ArraySchema',
    'PrimitiveSchema',
    'LoadDiagnostic',

    # Loader
    'DocumentLoader',
    'load_document',
    'ref_name',
]
