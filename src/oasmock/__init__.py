"""
oasmock - schema-driven API mock server

Answers HTTP requests from an OpenAPI document: the matched operation's
first 2xx response schema is walked to build a representative JSON body.
"""

__version__ = '1.0.0'
