"""
oasmock Mock Server

FastAPI-based HTTP mock server that answers requests from an OpenAPI
document instead of a real backend.

Features:
- Path template matching with '{name}' captures
- Schema-driven dummy response bodies
- Generic acknowledgement payload when nothing in the document applies
- Raw document route for documentation tooling
- Admin API with health, metrics and operation listing
"""

from __future__ import annotations  # Enable forward references for type hints

import copy
import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import uvicorn

from .matcher import OperationMatcher, MatchResult
from .generator import SchemaGenerator

from ..common import PathUtils, dumps_json, utc_timestamp
from ..openapi import Document, DocumentLoader


JSON_CONTENT_TYPE = "application/json"
FALLBACK_MESSAGE = "Mock response"

MOCK_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE"]


@dataclass
class MockConfig:
    """Configuration for mock server behavior."""

    # Document source, relative to the working directory
    document_path: str = "swagger.json"

    # Mount prefix stripped from request paths before matching (e.g. /CRMApi)
    base_path: str = ""

    # Requests passed through to other handlers instead of being mocked
    passthrough_prefixes: Tuple[str, ...] = ("/swagger",)
    passthrough_paths: Tuple[str, ...] = ("/favicon.ico",)

    # Raw document route (also served under the base path)
    document_route: str = "/swagger/v1/swagger.json"

    # Response behavior
    indent: Optional[int] = 2  # None for compact JSON

    # Server options
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "info"
    verbose_mode: bool = False  # Show each request and its match in the console

    # Admin API
    admin_enabled: bool = True
    admin_prefix: str = "/__admin__"


@dataclass
class MockMetrics:
    """Track mock server metrics."""

    total_requests: int = 0
    matched_requests: int = 0
    fallback_requests: int = 0
    errors: int = 0
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        uptime_seconds = (datetime.now() - datetime.fromisoformat(self.start_time)).total_seconds()
        return {
            'total_requests': self.total_requests,
            'matched_requests': self.matched_requests,
            'fallback_requests': self.fallback_requests,
            'errors': self.errors,
            'match_rate': round((self.matched_requests / self.total_requests * 100) if self.total_requests > 0 else 0, 2),
            'uptime_seconds': round(uptime_seconds, 2),
            'start_time': self.start_time
        }


@dataclass
class MockResponse:
    """Status, content type and JSON body produced for one request."""

    status_code: int
    body: Any
    content_type: str = JSON_CONTENT_TYPE
    matched: bool = False
    template: Optional[str] = None

    def render(self, indent: Optional[int] = 2) -> str:
        """Serialize the body as JSON text."""
        return dumps_json(self.body, indent=indent)


class MockResponder:
    """
    Turns (method, path) into a mock response using the document.

    The responder only reads the document, so one instance serves any
    number of concurrent requests.

    Example:
        responder = MockResponder(document, MockConfig(base_path='/CRMApi'))
        response = responder.handle('GET', '/CRMApi/api/v1/Thing/42')
        print(response.status_code, response.render())
    """

    def __init__(
        self,
        document: Document,
        config: Optional[MockConfig] = None,
        generator: Optional[SchemaGenerator] = None
    ):
        """
        Initialize mock responder.

        Args:
            document: Loaded OpenAPI document
            config: Optional MockConfig (base path)
            generator: Optional SchemaGenerator instance (will create if None)
        """
        self.document = document
        self.config = config or MockConfig()
        self.matcher = OperationMatcher(document)
        self.generator = generator or SchemaGenerator(document)
        self.logger = logging.getLogger("oasmock.mock")

    def handle(self, method: str, path: str) -> MockResponse:
        """
        Build the mock response for a request.

        Args:
            method: HTTP method
            path: Raw request path, possibly under the mount prefix

        Returns:
            MockResponse with the matched status and generated body, or the
            fallback payload with status 200
        """
        request_path = PathUtils.strip_base_path(path, self.config.base_path)
        match_result = self.matcher.find_match(method, request_path)

        if match_result.matched:
            response = self._respond_from_schema(match_result, request_path)
            if response is not None:
                return response
        else:
            self.logger.warning(f"No matching operation found for {method} {request_path}")

        self.logger.info(f"Returning default mock response for {method} {request_path}")
        return self.fallback(method, request_path)

    def _respond_from_schema(self, match_result: MatchResult, request_path: str) -> Optional[MockResponse]:
        self.logger.debug(f"Found matching operation: {match_result.template}")
        if match_result.path_params:
            params = ", ".join(f"{k}={v}" for k, v in match_result.path_params.items())
            self.logger.debug(f"Path parameters: {params}")

        selected = OperationMatcher.select_success_response(match_result.operation)
        if selected is None:
            return None

        status, response = selected
        if response.schema is None:
            return None

        self.logger.debug(f"Generating mock response from schema for {request_path}")
        body = self.generator.generate(response.schema, match_result.path_params)
        return MockResponse(
            status_code=OperationMatcher.status_code(status),
            body=body,
            matched=True,
            template=match_result.template
        )

    @staticmethod
    def fallback(method: str, request_path: str) -> MockResponse:
        """Generic acknowledgement used when no schema-backed response applies."""
        return MockResponse(
            status_code=200,
            body={
                'message': FALLBACK_MESSAGE,
                'path': request_path,
                'method': method,
                'timestamp': utc_timestamp()
            }
        )


class MockServer:
    """
    FastAPI-based mock server for an OpenAPI document.

    Loads the document once and answers every non-reserved request with a
    response generated from the matched operation's 2xx schema.

    Example:
        # Load document and start server
        server = MockServer('swagger.json')
        server.start(host='0.0.0.0', port=8080)

        # Mounted under a prefix
        config = MockConfig(base_path='/CRMApi', indent=None)
        server = MockServer('swagger.json', config=config)
        server.start()
    """

    def __init__(
        self,
        document_path: Optional[str] = None,
        config: Optional[MockConfig] = None,
        responder: Optional[MockResponder] = None
    ):
        """
        Initialize mock server.

        Args:
            document_path: Path to the OpenAPI document (overrides config)
            config: Optional MockConfig for server behavior
            responder: Optional MockResponder instance (will create if None)

        Raises:
            OSError: If the document exists but cannot be read
        """
        self.config = config or MockConfig()
        self.document_path = Path(document_path or self.config.document_path)
        self.metrics = MockMetrics()

        # Setup logging first (before loading the document)
        self.logger = logging.getLogger("oasmock.mock")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.document = self._load_document()
        self.responder = responder or MockResponder(self.document, self.config)

        # Setup FastAPI app
        self.app = self._create_app()

    def _load_document(self) -> Document:
        """Load the OpenAPI document; read failures propagate."""
        try:
            document = DocumentLoader(str(self.document_path)).load()
        except Exception:
            self.logger.error(f"Error loading document from {self.document_path}")
            raise
        self.logger.info(
            f"Loaded {len(self.document_operations(document))} operations from {self.document_path}"
        )
        return document

    @staticmethod
    def document_operations(document: Document) -> list:
        """Summaries of every operation for the admin API."""
        operations = []
        for template, method, operation in document.iter_operations():
            selected = OperationMatcher.select_success_response(operation)
            operations.append({
                'method': method.upper(),
                'path': template,
                'operation_id': operation.operation_id,
                'summary': operation.summary,
                'mock_status': OperationMatcher.status_code(selected[0]) if selected else None,
                'has_schema': bool(selected and selected[1].schema is not None)
            })
        return operations

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="oasmock",
            description="Mock HTTP server generating responses from an OpenAPI document",
            version="1.0.0",
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )

        # Admin API routes
        if self.config.admin_enabled:
            @app.get(f"{self.config.admin_prefix}/health")
            async def get_health():
                """Health check."""
                return JSONResponse(content={
                    'status': 'Healthy',
                    'timestamp': utc_timestamp(),
                    'version': app.version
                })

            @app.get(f"{self.config.admin_prefix}/metrics")
            async def get_metrics():
                """Get server metrics."""
                return JSONResponse(content=self.metrics.to_dict())

            @app.post(f"{self.config.admin_prefix}/reset")
            async def reset_metrics():
                """Reset metrics."""
                self.metrics = MockMetrics()
                return JSONResponse(content={'status': 'reset'})

            @app.get(f"{self.config.admin_prefix}/config")
            async def get_config():
                """Get current configuration."""
                return JSONResponse(content={
                    'document_path': str(self.document_path),
                    'base_path': self.config.base_path,
                    'passthrough_prefixes': list(self.config.passthrough_prefixes),
                    'passthrough_paths': list(self.config.passthrough_paths),
                    'indent': self.config.indent,
                    'document': self.document.summary()
                })

            @app.get(f"{self.config.admin_prefix}/operations")
            async def list_operations():
                """List all operations of the loaded document."""
                operations = self.document_operations(self.document)
                return JSONResponse(content={
                    'total': len(operations),
                    'operations': operations
                })

        # Raw document for documentation tooling, with servers pointed at this host
        document_routes = [self.config.document_route]
        base_path = PathUtils.normalize_base_path(self.config.base_path)
        if base_path:
            document_routes.append(base_path + self.config.document_route)

        for route in document_routes:
            app.add_api_route(route, self._serve_document, methods=["GET"])

        # Main catch-all route for mocking
        @app.api_route("/{path:path}", methods=MOCK_METHODS)
        async def mock_request(request: Request, path: str):
            """Handle incoming requests and serve mock responses."""
            return await self._handle_request(request)

        return app

    async def _serve_document(self, request: Request) -> JSONResponse:
        """Serve the loaded document as JSON."""
        if not self.document.raw:
            raise HTTPException(status_code=404, detail="No document loaded")

        document = copy.deepcopy(dict(self.document.raw))
        base_path = PathUtils.normalize_base_path(self.config.base_path)
        document['servers'] = [{
            'url': f"{request.url.scheme}://{request.url.netloc}{base_path}",
            'description': "Mock Server"
        }]
        return JSONResponse(content=jsonable_encoder(document))

    async def _handle_request(self, request: Request) -> Response:
        """
        Handle incoming request and serve mock response.

        Args:
            request: FastAPI Request object

        Returns:
            FastAPI Response with mocked data
        """
        path = request.url.path
        method = request.method

        if PathUtils.is_passthrough(
            path,
            self.config.base_path,
            self.config.passthrough_prefixes,
            self.config.passthrough_paths
        ):
            # Nothing else is mounted behind the mock
            raise HTTPException(status_code=404, detail="Not Found")

        self.metrics.total_requests += 1
        self.logger.info(f"Mock API request: {method} {path}")

        if self.config.verbose_mode:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {method} {path}")

        try:
            mock_response = self.responder.handle(method, path)
            content = mock_response.render(indent=self.config.indent)
        except Exception as e:
            self.metrics.errors += 1
            self.logger.exception(f"Error processing mock request for {method} {path}")
            return Response(
                content=dumps_json({
                    'error': str(e),
                    'stackTrace': traceback.format_exc(),
                    'timestamp': utc_timestamp()
                }, indent=self.config.indent),
                status_code=500,
                media_type=JSON_CONTENT_TYPE
            )

        if mock_response.matched:
            self.metrics.matched_requests += 1
            self.logger.info(f"Returning mock response: {mock_response.status_code} for {method} {path}")
        else:
            self.metrics.fallback_requests += 1

        if self.config.verbose_mode:
            timestamp = datetime.now().strftime("%H:%M:%S")
            if mock_response.matched:
                print(f"[{timestamp}]   ✓ Matched: {mock_response.template} -> {mock_response.status_code}")
            else:
                print(f"[{timestamp}]   ✗ No schema-backed response, fallback payload")

        return Response(
            content=content,
            status_code=mock_response.status_code,
            media_type=mock_response.content_type
        )

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        access_log: bool = True
    ):
        """
        Start the mock server.

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
            access_log: Enable access logging
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port
        summary = self.document.summary()

        print(f"🚀 oasmock server starting...")
        print(f"   Host: {actual_host}:{actual_port}")
        print(f"   Document: {self.document_path}")
        print(f"   Operations loaded: {summary['operations']}")
        print(f"   Schemas loaded: {summary['schemas']}")

        if self.config.base_path:
            print(f"   Base path: {self.config.base_path}")

        if self.document.is_empty:
            print(f"   ⚠️  No operations loaded, every request gets the fallback payload")

        if self.config.admin_enabled:
            print(f"   Admin API: http://{actual_host}:{actual_port}{self.config.admin_prefix}/metrics")

        print()

        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app


def create_mock_server(
    document_path: str = "swagger.json",
    host: str = "127.0.0.1",
    port: int = 8080,
    base_path: str = "",
    indent: Optional[int] = 2,
    log_level: str = "info",
    admin_enabled: bool = True,
    verbose_mode: bool = False
) -> MockServer:
    """
    Convenience function to create and configure a mock server.

    Args:
        document_path: Path to the OpenAPI document
        host: Host to bind to
        port: Port to bind to
        base_path: Mount prefix stripped before matching
        indent: JSON indentation (None for compact output)
        log_level: Log level (debug, info, warning, error)
        admin_enabled: Enable the admin API
        verbose_mode: Print each request and its match

    Returns:
        Configured MockServer instance

    Example:
        server = create_mock_server('swagger.json', port=8080, base_path='/CRMApi')
        server.start()
    """
    config = MockConfig(
        document_path=document_path,
        host=host,
        port=port,
        base_path=base_path,
        indent=indent,
        log_level=log_level,
        admin_enabled=admin_enabled,
        verbose_mode=verbose_mode
    )

    return MockServer(config=config)
