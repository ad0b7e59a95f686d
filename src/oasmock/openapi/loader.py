"""
oasmock Document Loader

Reads an OpenAPI 3.x (or Swagger 2.0) document from disk and builds the
immutable Document model used by the mock responder.

Loading is forgiving about content and strict about the environment:
- Missing file: empty document, warning logged
- Syntax or structure problems: partial document plus diagnostics
- I/O failures (permissions, unreadable bytes): the error propagates
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .model import (
    HTTP_METHODS,
    ArraySchema,
    Document,
    LoadDiagnostic,
    ObjectSchema,
    Operation,
    PathItem,
    PrimitiveSchema,
    RefSchema,
    Response,
    Schema,
    freeze,
)


logger = logging.getLogger("oasmock.openapi")

JSON_MEDIA_TYPE = 'application/json'
YAML_SUFFIXES = ('.yaml', '.yml')
SCHEMA_REF_PREFIXES = ('#/components/schemas/', '#/definitions/')
MAX_SCHEMA_NESTING = 64


def ref_name(ref: str) -> str:
    """
    Turn a local schema reference into its registry name.

    '#/components/schemas/Thing' and '#/definitions/Thing' both give 'Thing'.
    Anything else is returned unchanged and will not resolve.
    """
    for prefix in SCHEMA_REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):].replace('~1', '/').replace('~0', '~')
    return ref


class DocumentLoader:
    """
    Loader for OpenAPI documents.

    Handles both document generations:
    - OpenAPI 3.x: components/schemas, content."application/json".schema
    - Swagger 2.0: definitions, responses.<code>.schema

    JSON is the default format; files ending in .yaml or .yml are read
    with PyYAML.

    Example:
        loader = DocumentLoader("swagger.json")
        document = loader.load()

        for template, method, operation in document.iter_operations():
            print(method.upper(), template)
    """

    def __init__(self, file_path: str):
        """
        Initialize document loader.

        Args:
            file_path: Path to the OpenAPI document
        """
        self.file_path = Path(file_path)
        self.diagnostics: List[LoadDiagnostic] = []
        self._swagger2 = False
        self._raw: Dict[str, Any] = {}
        self._parsing: set = set()

    def load(self) -> Document:
        """
        Load the document.

        Returns:
            Parsed Document. Empty when the file does not exist.

        Raises:
            OSError: If the file exists but cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        self.diagnostics = []
        logger.info(f"Loading document from: {self.file_path}")

        if not self.file_path.exists():
            logger.warning(f"Document not found at {self.file_path}")
            return Document.empty()

        try:
            text = self.file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError):
            logger.exception(f"Error loading document from {self.file_path}")
            raise

        data = self._parse_text(text)
        document = self._build_document(data)

        if self.diagnostics:
            logger.warning(f"Document parse errors in {self.file_path}:")
            for diagnostic in self.diagnostics:
                logger.warning(f"Document parse error: {diagnostic}")
        else:
            logger.info("Document loaded successfully")

        return document

    @staticmethod
    def load_from_file(file_path: str) -> Document:
        """
        Convenience method to load a document in one call.

        Example:
            document = DocumentLoader.load_from_file("swagger.json")
        """
        return DocumentLoader(file_path).load()

    def _report(self, message: str, pointer: str = '') -> None:
        self.diagnostics.append(LoadDiagnostic(message=message, pointer=pointer))

    def _parse_text(self, text: str) -> Dict[str, Any]:
        """Parse raw text into a mapping, recording syntax errors."""
        if self.file_path.suffix.lower() in YAML_SUFFIXES:
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as e:
                self._report(f"Invalid YAML: {e}")
                return {}
            except RecursionError:
                self._report("Invalid YAML: nesting too deep")
                return {}
        else:
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                self._report(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})")
                return {}
            except RecursionError:
                self._report("Invalid JSON: nesting too deep")
                return {}

        if not isinstance(data, dict):
            self._report(f"Document root must be an object, got {type(data).__name__}")
            return {}

        return data

    def _build_document(self, data: Dict[str, Any]) -> Document:
        self._raw = data
        self._swagger2 = str(data.get('swagger', '')).startswith('2')

        if data and 'openapi' not in data and not self._swagger2:
            self._report("Missing 'openapi' or 'swagger' version field")

        info = data.get('info') if isinstance(data.get('info'), dict) else {}

        return Document(
            paths=self._parse_paths(data.get('paths', {})),
            schemas=self._parse_registry(),
            title=str(info.get('title', '')),
            version=str(info.get('version', '')),
            openapi_version=str(data.get('openapi') or data.get('swagger') or ''),
            raw=freeze(data),
            diagnostics=tuple(self.diagnostics),
        )

    def _registry_source(self) -> Tuple[Any, str]:
        if self._swagger2:
            return self._raw.get('definitions', {}), '#/definitions'
        components = self._raw.get('components', {})
        if not isinstance(components, dict):
            self._report("'components' must be an object", '#/components')
            return {}, '#/components/schemas'
        return components.get('schemas', {}), '#/components/schemas'

    def _parse_registry(self) -> Mapping[str, Schema]:
        source, pointer = self._registry_source()
        if not isinstance(source, dict):
            self._report("Schema registry must be an object", pointer)
            return freeze({})

        return freeze({
            str(name): self._parse_schema(node, f"{pointer}/{name}")
            for name, node in source.items()
        })

    def _parse_paths(self, paths: Any) -> Mapping[str, PathItem]:
        if not isinstance(paths, dict):
            self._report("'paths' must be an object", '#/paths')
            return freeze({})

        result: Dict[str, PathItem] = {}
        for template, item in paths.items():
            pointer = f"#/paths/{template}"
            if not isinstance(item, dict):
                self._report("Path item must be an object", pointer)
                continue
            if '$ref' in item:
                self._report("Path item references are not supported", pointer)

            operations: Dict[str, Operation] = {}
            for key, operation in item.items():
                method = str(key).lower()
                if method not in HTTP_METHODS:
                    continue
                if not isinstance(operation, dict):
                    self._report("Operation must be an object", f"{pointer}/{key}")
                    continue
                operations[method] = self._parse_operation(operation, f"{pointer}/{key}")

            result[str(template)] = PathItem(operations=freeze(operations))

        return freeze(result)

    def _parse_operation(self, operation: Dict[str, Any], pointer: str) -> Operation:
        responses = operation.get('responses', {})
        if not isinstance(responses, dict):
            self._report("'responses' must be an object", f"{pointer}/responses")
            responses = {}

        parsed: Dict[str, Response] = {}
        for code, response in responses.items():
            response_pointer = f"{pointer}/responses/{code}"
            response = self._resolve_response(response, response_pointer)
            if response is None:
                continue
            parsed[str(code)] = Response(
                description=str(response.get('description', '')),
                schema=self._response_schema(response, response_pointer),
            )

        return Operation(
            responses=freeze(parsed),
            operation_id=operation.get('operationId'),
            summary=str(operation.get('summary', '')),
        )

    def _resolve_response(self, response: Any, pointer: str) -> Optional[Dict[str, Any]]:
        """Follow a response-level $ref into the shared responses section."""
        if not isinstance(response, dict):
            self._report("Response must be an object", pointer)
            return None

        ref = response.get('$ref')
        if not isinstance(ref, str):
            return response

        if self._swagger2:
            prefix, shared = '#/responses/', self._raw.get('responses', {})
        else:
            components = self._raw.get('components', {})
            prefix = '#/components/responses/'
            shared = components.get('responses', {}) if isinstance(components, dict) else {}

        target = None
        if ref.startswith(prefix) and isinstance(shared, dict):
            target = shared.get(ref[len(prefix):])
        if not isinstance(target, dict) or '$ref' in target:
            self._report(f"Unresolved response reference '{ref}'", pointer)
            return None
        return target

    def _response_schema(self, response: Dict[str, Any], pointer: str) -> Optional[Schema]:
        if self._swagger2:
            node = response.get('schema')
            return self._parse_schema(node, f"{pointer}/schema") if node is not None else None

        content = response.get('content')
        if not isinstance(content, dict):
            return None
        media = content.get(JSON_MEDIA_TYPE)
        if not isinstance(media, dict) or media.get('schema') is None:
            return None
        return self._parse_schema(media['schema'], f"{pointer}/content/{JSON_MEDIA_TYPE}/schema")

    def _parse_schema(self, node: Any, pointer: str, nesting: int = 0) -> Schema:
        """
        Classify a raw schema node into one of the Schema variants.

        Precedence matches the generator: non-empty properties first, then
        $ref, then array with items, then primitive. Nodes nested deeper than
        MAX_SCHEMA_NESTING become empty primitives; the generator stops long
        before that depth.
        """
        if not isinstance(node, dict):
            self._report("Schema must be an object", pointer)
            return PrimitiveSchema()

        if nesting > MAX_SCHEMA_NESTING:
            self._report("Schema nesting too deep", pointer)
            return PrimitiveSchema()

        # YAML aliases can build self-containing mappings
        if id(node) in self._parsing:
            self._report("Recursive schema alias", pointer)
            return PrimitiveSchema()

        self._parsing.add(id(node))
        try:
            return self._classify(node, pointer, nesting)
        finally:
            self._parsing.discard(id(node))

    def _classify(self, node: Dict[str, Any], pointer: str, nesting: int) -> Schema:
        declared_type = _declared_type(node)

        properties = node.get('properties')
        if isinstance(properties, dict) and properties:
            return ObjectSchema(
                properties=freeze({
                    str(name): self._parse_schema(sub, f"{pointer}/properties/{name}", nesting + 1)
                    for name, sub in properties.items()
                }),
                declared_type=declared_type,
            )

        ref = node.get('$ref')
        if isinstance(ref, str):
            name = ref_name(ref)
            if name == ref:
                self._report(f"Unsupported schema reference '{ref}'", pointer)
            return RefSchema(name=name, declared_type=declared_type)

        items = node.get('items')
        if declared_type == 'array' and isinstance(items, dict):
            return ArraySchema(items=self._parse_schema(items, f"{pointer}/items", nesting + 1))

        schema_format = node.get('format')
        return PrimitiveSchema(
            declared_type=declared_type,
            format=schema_format if isinstance(schema_format, str) else None,
        )


def _declared_type(node: Dict[str, Any]) -> Optional[str]:
    """Read the 'type' keyword; for type lists take the first non-null entry."""
    value = node.get('type')
    if isinstance(value, list):
        value = next((v for v in value if isinstance(v, str) and v != 'null'), None)
    return value if isinstance(value, str) else None


def load_document(file_path: str) -> Document:
    """Load an OpenAPI document from a path."""
    return DocumentLoader(file_path).load()
