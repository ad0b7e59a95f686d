"""
Shared fixtures for oasmock tests.
"""

import json

import pytest

from oasmock.openapi import DocumentLoader


@pytest.fixture
def write_document(tmp_path):
    """Write a document to a temporary file and return its path."""
    def _write(data, name='swagger.json'):
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding='utf-8')
        else:
            path.write_text(json.dumps(data), encoding='utf-8')
        return str(path)

    return _write


@pytest.fixture
def load_document(write_document):
    """Write a document dict and load it back as a Document."""
    def _load(data, name='swagger.json'):
        return DocumentLoader(write_document(data, name)).load()

    return _load


@pytest.fixture
def widget_document_data():
    """Document with a widget API, a 404-only operation and shared schemas."""
    return {
        'openapi': '3.0.1',
        'info': {'title': 'Widget API', 'version': 'v1'},
        'paths': {
            '/api/v1/Widget/{id}': {
                'get': {
                    'operationId': 'GetWidget',
                    'responses': {
                        '200': {
                            'description': 'OK',
                            'content': {
                                'application/json': {
                                    'schema': {
                                        'type': 'object',
                                        'properties': {
                                            'widgetId': {'type': 'integer', 'format': 'int32'},
                                            'createdAt': {'type': 'string', 'format': 'date-time'}
                                        }
                                    }
                                }
                            }
                        }
                    }
                }
            },
            '/api/v1/Widget': {
                'post': {
                    'operationId': 'CreateWidget',
                    'responses': {
                        '201': {
                            'description': 'Created',
                            'content': {
                                'application/json': {
                                    'schema': {'$ref': '#/components/schemas/Widget'}
                                }
                            }
                        },
                        '200': {
                            'description': 'OK',
                            'content': {
                                'application/json': {
                                    'schema': {'type': 'string'}
                                }
                            }
                        }
                    }
                }
            },
            '/api/v1/Foo': {
                'get': {
                    'responses': {
                        '404': {
                            'description': 'Not found',
                            'content': {
                                'application/json': {
                                    'schema': {'type': 'object', 'properties': {'error': {'type': 'string'}}}
                                }
                            }
                        }
                    }
                }
            },
            '/api/v1/Bar': {
                'delete': {
                    'responses': {
                        '204': {'description': 'No content'}
                    }
                }
            }
        },
        'components': {
            'schemas': {
                'Widget': {
                    'type': 'object',
                    'properties': {
                        'widgetId': {'type': 'integer'},
                        'name': {'type': 'string'},
                        'tags': {'type': 'array', 'items': {'type': 'string'}}
                    }
                }
            }
        }
    }
