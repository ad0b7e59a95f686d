"""
oasmock Schema Generator

Walks a response schema and produces a structurally representative JSON
value for it.

Features:
- Object, reference, array and primitive schemas
- Path parameter 'id' injected into '...Id' properties
- Reference cycle protection and a hard depth ceiling
- Format-aware primitive values (date-time, date, uuid, email, int64, float)
"""

import math
import random
import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Set

from ..common import get_ignore_case
from ..openapi import (
    ArraySchema,
    Document,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    Schema,
)


MAX_DEPTH = 20
MAX_ARRAY_ITEMS = 3

SAMPLE_TEXT = 'Sample Text'
SAMPLE_EMAIL = 'john.doe@example.com'
SAMPLE_INT64 = 1234567890
SAMPLE_FLOAT = 123.45

NUMERIC_TYPES = ('integer', 'number')


class SchemaGenerator:
    """
    Generates dummy data from document schemas.

    Evaluation order for every schema node, first match wins:
    1. Object with properties: one value per property
    2. Reference: resolve from the registry, once per call tree
    3. Array with items: min(3, depth + 1) generated items
    4. Primitive: dispatched on type and format

    The generator keeps no state between calls. Random values come from the
    module-level `random` functions unless an explicit Random is given.

    Example:
        generator = SchemaGenerator(document)
        body = generator.generate(schema, {'id': '42'})
    """

    def __init__(self, document: Document, rng: Optional[random.Random] = None):
        """
        Initialize schema generator.

        Args:
            document: Document whose schema registry resolves references
            rng: Optional Random instance for reproducible output
        """
        self.document = document
        self.rng = rng or random

    def generate(
        self,
        schema: Optional[Schema],
        path_params: Optional[Dict[str, str]] = None,
        depth: int = 0,
        visited: Optional[Set[str]] = None
    ) -> Any:
        """
        Generate a value for a schema.

        Args:
            schema: Schema to walk
            path_params: Captured path parameters of the request
            depth: Current recursion depth
            visited: Reference names already expanded in this call tree.
                Shared by all branches, so a name expanded in one array item
                or property is not expanded again anywhere else.

        Returns:
            JSON-compatible value, None where nothing can be generated
        """
        if depth > MAX_DEPTH or schema is None:
            return None
        if visited is None:
            visited = set()

        if isinstance(schema, ObjectSchema):
            return self._generate_object(schema, path_params, depth, visited)

        if isinstance(schema, RefSchema):
            if schema.name in visited:
                return None
            visited.add(schema.name)
            resolved = self.document.resolve(schema.name)
            if resolved is None:
                return None
            return self.generate(resolved, path_params, depth + 1, visited)

        if isinstance(schema, ArraySchema):
            count = min(MAX_ARRAY_ITEMS, depth + 1)
            return [
                self.generate(schema.items, path_params, depth + 1, visited)
                for _ in range(count)
            ]

        return self._generate_primitive(schema)

    def _generate_object(
        self,
        schema: ObjectSchema,
        path_params: Optional[Dict[str, str]],
        depth: int,
        visited: Set[str]
    ) -> Dict[str, Any]:
        id_value = get_ignore_case(path_params, 'id')

        result: Dict[str, Any] = {}
        for name, prop in schema.properties.items():
            if id_value is not None and name.lower().endswith('id'):
                result[name] = coerce_id(id_value, self._id_type(prop))
            else:
                result[name] = self.generate(prop, path_params, depth + 1, visited)
        return result

    def _id_type(self, schema: Schema) -> Optional[str]:
        """Declared type of an identifier property, following references."""
        seen: Set[str] = set()
        while isinstance(schema, RefSchema) and schema.declared_type is None:
            if schema.name in seen:
                return None
            seen.add(schema.name)
            schema = self.document.resolve(schema.name)
        return schema.declared_type if schema is not None else None

    def _generate_primitive(self, schema: PrimitiveSchema) -> Any:
        schema_type = (schema.declared_type or '').lower()
        schema_format = schema.format

        if schema_type == 'string':
            if schema_format == 'date-time':
                return datetime.now().astimezone().isoformat()
            if schema_format == 'date':
                return datetime.now().strftime('%Y-%m-%d')
            if schema_format == 'uuid':
                return str(uuid.uuid4())
            if schema_format == 'email':
                return SAMPLE_EMAIL
            return SAMPLE_TEXT

        if schema_type == 'integer':
            if schema_format == 'int64':
                return SAMPLE_INT64
            return self.rng.randrange(1, 1000)

        if schema_type == 'number':
            if schema_format == 'float':
                return SAMPLE_FLOAT
            return round(self.rng.random() * 1000, 2)

        if schema_type == 'boolean':
            return self.rng.randrange(2) == 1

        if schema_type == 'object':
            return {}

        return None


def coerce_id(value: str, declared_type: Optional[str]) -> Any:
    """
    Convert a path parameter for an identifier property.

    Numeric properties get an int if the value parses as one, otherwise a
    finite float, otherwise the raw string. Digit separators and non-ASCII
    digits are not numbers here. Other properties get the raw string.
    """
    if (declared_type or '').lower() not in NUMERIC_TYPES:
        return value
    if '_' in value or not value.isascii():
        return value

    try:
        return int(value)
    except ValueError:
        pass

    try:
        number = float(value)
    except ValueError:
        return value
    return number if math.isfinite(number) else value
