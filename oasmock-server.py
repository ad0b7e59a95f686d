#!/usr/bin/env python3
"""
oasmock - schema-driven API mock server

This is a convenience wrapper that calls the packaged implementation.
The actual implementation is in src/oasmock/cli.py

Usage:
    python oasmock-server.py serve swagger.json --port 8080

For more information, see README.md
"""

import sys
from pathlib import Path

# Run from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from oasmock.cli import main

if __name__ == '__main__':
    main()
