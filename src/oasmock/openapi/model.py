"""
oasmock Document Model

Immutable in-memory view of an OpenAPI document, reduced to what the mock
responder needs: path templates, operations, responses and response schemas.

Schemas are modelled as a small tagged union:
- ObjectSchema: an object with a non-empty property map
- RefSchema: a named pointer into the document's schema registry
- ArraySchema: an array with an items schema
- PrimitiveSchema: everything else (string, integer, number, boolean, ...)
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union


HTTP_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ObjectSchema:
    """Object with declared properties, in document order."""

    properties: Mapping[str, 'Schema']
    declared_type: Optional[str] = 'object'


@dataclass(frozen=True)
class RefSchema:
    """Reference to a named schema in the registry. Resolved lazily."""

    name: str
    declared_type: Optional[str] = None


@dataclass(frozen=True)
class ArraySchema:
    """Array with an items schema."""

    items: 'Schema'
    declared_type: Optional[str] = 'array'


@dataclass(frozen=True)
class PrimitiveSchema:
    """Leaf schema dispatched on type and format."""

    declared_type: Optional[str] = None
    format: Optional[str] = None


Schema = Union[ObjectSchema, RefSchema, ArraySchema, PrimitiveSchema]


@dataclass(frozen=True)
class Response:
    """A single status-code response of an operation."""

    description: str = ''
    schema: Optional[Schema] = None


@dataclass(frozen=True)
class Operation:
    """One HTTP method under a path template."""

    responses: Mapping[str, Response] = field(default_factory=_empty_mapping)
    operation_id: Optional[str] = None
    summary: str = ''


@dataclass(frozen=True)
class PathItem:
    """Operations of one path template keyed by lowercase HTTP method."""

    operations: Mapping[str, Operation] = field(default_factory=_empty_mapping)

    def get_operation(self, method: str) -> Optional[Operation]:
        """Look up an operation by HTTP method, ignoring case."""
        return self.operations.get(method.lower())


@dataclass(frozen=True)
class LoadDiagnostic:
    """A non-fatal problem found while reading the document."""

    message: str
    pointer: str = ''

    def __str__(self) -> str:
        if self.pointer:
            return f"{self.message} [{self.pointer}]"
        return self.message


@dataclass(frozen=True)
class Document:
    """
    Parsed API description.

    Built once at startup and only read afterwards, so it can be shared by
    any number of concurrently handled requests without locking.

    `raw` is the parsed source mapping for the documentation route. Only its
    top level is read-only; callers copy it before changing nested values.
    """

    paths: Mapping[str, PathItem] = field(default_factory=_empty_mapping)
    schemas: Mapping[str, Schema] = field(default_factory=_empty_mapping)
    title: str = ''
    version: str = ''
    openapi_version: str = ''
    raw: Mapping[str, Any] = field(default_factory=_empty_mapping)
    diagnostics: tuple = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> 'Document':
        """Document with no paths and no schemas."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.paths and not self.schemas

    def resolve(self, name: str) -> Optional[Schema]:
        """Resolve a registry name, or None if it is not defined."""
        return self.schemas.get(name)

    def iter_operations(self):
        """Yield (path_template, method, operation) in document order."""
        for template, path_item in self.paths.items():
            for method, operation in path_item.operations.items():
                yield template, method, operation

    def summary(self) -> Dict[str, Any]:
        """Short description for logs and the admin API."""
        operations: List[str] = [
            f"{method.upper()} {template}" for template, method, _ in self.iter_operations()
        ]
        return {
            'title': self.title,
            'version': self.version,
            'openapi': self.openapi_version,
            'paths': len(self.paths),
            'operations': len(operations),
            'schemas': len(self.schemas),
            'diagnostics': [str(d) for d in self.diagnostics],
        }


def freeze(mapping: Dict[str, Any]) -> Mapping[str, Any]:
    """Wrap a dict in a read-only view, keeping insertion order."""
    return MappingProxyType(dict(mapping))
