"""
oasmock CLI

Command-line interface for the oasmock server.

Commands:
    serve       - Start the mock HTTP server
    generate    - Print the mock response for one request
    validate    - Load a document and report problems

Examples:
    # Serve swagger.json from the working directory
    oasmock serve

    # Serve a document mounted under /CRMApi
    oasmock serve api.yaml --base-path /CRMApi --port 8080

    # Preview a response without starting the server
    oasmock generate swagger.json GET /api/v1/Widget/7
"""

import argparse
import logging
import random
import sys
from pathlib import Path

from .mock import MockConfig, MockResponder, MockServer, SchemaGenerator
from .openapi import DocumentLoader


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str):
    """Send oasmock logs to stderr at the given level."""
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


def cmd_serve(args):
    """
    Start the mock HTTP server.

    Args:
        args: Parsed command-line arguments
    """
    print(f"🎭 oasmock Mock Server")

    if args.verbose:
        print(f"📋 Verbose mode enabled (request and match logging)")

    config = MockConfig(
        document_path=args.document,
        base_path=args.base_path,
        indent=args.indent if args.indent > 0 else None,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        verbose_mode=args.verbose,
        admin_enabled=not args.no_admin
    )

    # Create server
    try:
        server = MockServer(config=config)
    except Exception as e:
        print(f"❌ Failed to create mock server: {e}")
        sys.exit(1)

    # Start server (blocking)
    try:
        server.start()
    except KeyboardInterrupt:
        print("\n\n👋 Mock server stopped")


def cmd_generate(args):
    """
    Print the mock response for a single request.

    Args:
        args: Parsed command-line arguments
    """
    try:
        document = DocumentLoader(args.document).load()
    except Exception as e:
        print(f"❌ Failed to load document: {e}")
        sys.exit(1)

    rng = random.Random(args.seed) if args.seed is not None else None
    responder = MockResponder(
        document,
        MockConfig(base_path=args.base_path),
        generator=SchemaGenerator(document, rng=rng)
    )

    response = responder.handle(args.method.upper(), args.path)
    source = response.template if response.matched else "fallback"

    print(f"HTTP {response.status_code} ({response.content_type}, {source})")
    print(response.render(indent=args.indent if args.indent > 0 else None))


def cmd_validate(args):
    """
    Load a document and report what the mock server would see.

    Args:
        args: Parsed command-line arguments
    """
    print(f"✓ oasmock Document Validation")
    print(f"   Document: {args.document}")

    if not Path(args.document).exists():
        print(f"❌ Document not found: {args.document}")
        sys.exit(1)

    try:
        document = DocumentLoader(args.document).load()
    except Exception as e:
        print(f"❌ Failed to read document: {e}")
        sys.exit(1)

    summary = document.summary()
    print(f"   Title: {summary['title'] or '(none)'} {summary['version']}")
    print(f"   Operations: {summary['operations']}")
    print(f"   Schemas: {summary['schemas']}")
    print()

    for operation in MockServer.document_operations(document):
        status = operation['mock_status'] or 'fallback'
        body = "schema" if operation['has_schema'] else "no schema"
        print(f"   • {operation['method']:7} {operation['path']} -> {status} ({body})")

    if document.diagnostics:
        print()
        print("⚠️  Diagnostics:")
        for diagnostic in document.diagnostics:
            print(f"   • {diagnostic}")
        print()
        print(f"📊 {len(document.diagnostics)} problems found")
        sys.exit(1)

    print()
    print("✅ All validations passed!")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='oasmock',
        description="oasmock - mock HTTP server generating responses from an OpenAPI document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve swagger.json from the working directory
  %(prog)s serve

  # Serve under a mount prefix on another port
  %(prog)s serve api.json --base-path /CRMApi --port 9090

  # Preview a generated response
  %(prog)s generate api.json GET /api/v1/Widget/7 --seed 1

  # Check a document
  %(prog)s validate api.json
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # --- SERVE command ---
    serve_parser = subparsers.add_parser('serve', help='Start mock HTTP server')
    serve_parser.add_argument('document', nargs='?', default='swagger.json',
                              help='OpenAPI document (default: swagger.json)')
    serve_parser.add_argument('--host', default='127.0.0.1', help='Host to bind (default: 127.0.0.1)')
    serve_parser.add_argument('-p', '--port', type=int, default=8080, help='Port to bind (default: 8080)')
    serve_parser.add_argument('-b', '--base-path', default='', help='Mount prefix stripped before matching (e.g. /CRMApi)')
    serve_parser.add_argument('--indent', type=int, default=2, help='JSON indentation, 0 for compact (default: 2)')
    serve_parser.add_argument('--no-admin', action='store_true', help='Disable admin API')
    serve_parser.add_argument('--log-level', default='info', choices=['debug', 'info', 'warning', 'error'],
                              help='Log level (default: info)')
    serve_parser.add_argument('--verbose', action='store_true', help='Show each request and its match')

    # --- GENERATE command ---
    generate_parser = subparsers.add_parser('generate', help='Print the mock response for one request')
    generate_parser.add_argument('document', help='OpenAPI document')
    generate_parser.add_argument('method', help='HTTP method (e.g. GET)')
    generate_parser.add_argument('path', help='Request path (e.g. /api/v1/Widget/7)')
    generate_parser.add_argument('-b', '--base-path', default='', help='Mount prefix stripped before matching')
    generate_parser.add_argument('--indent', type=int, default=2, help='JSON indentation, 0 for compact (default: 2)')
    generate_parser.add_argument('--seed', type=int, help='Random seed for reproducible values')
    generate_parser.add_argument('--log-level', default='warning', choices=['debug', 'info', 'warning', 'error'],
                                 help='Log level (default: warning)')

    # --- VALIDATE command ---
    validate_parser = subparsers.add_parser('validate', help='Validate an OpenAPI document')
    validate_parser.add_argument('document', help='OpenAPI document')
    validate_parser.add_argument('--log-level', default='error', choices=['debug', 'info', 'warning', 'error'],
                                 help='Log level (default: error)')

    # Parse arguments
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)

    # Dispatch to command handler
    if args.command == 'serve':
        cmd_serve(args)
    elif args.command == 'generate':
        cmd_generate(args)
    elif args.command == 'validate':
        cmd_validate(args)


if __name__ == '__main__':
    main()
