"""
Tests for oasmock common utilities

Tests shared helpers including:
- Path splitting and capture segments
- Base path normalization and stripping
- Passthrough checks
- Case-insensitive lookup and JSON output
"""

from datetime import datetime

import pytest

from oasmock.common import PathUtils, dumps_json, get_ignore_case, utc_timestamp


class TestPathUtils:
    """Test PathUtils path handling."""

    def test_split_segments(self):
        assert PathUtils.split_segments('/api/v1/Thing/') == ['api', 'v1', 'Thing']
        assert PathUtils.split_segments('api/v1/Thing') == ['api', 'v1', 'Thing']

    def test_split_root(self):
        assert PathUtils.split_segments('/') == ['']

    def test_capture_segments(self):
        assert PathUtils.is_capture('{id}')
        assert not PathUtils.is_capture('id')
        assert not PathUtils.is_capture('{id')
        assert PathUtils.capture_name('{thingId}') == 'thingId'

    @pytest.mark.parametrize('base_path, expected', [
        ('', ''),
        ('/', ''),
        ('/CRMApi', '/CRMApi'),
        ('CRMApi', '/CRMApi'),
        ('/CRMApi/', '/CRMApi'),
        (None, ''),
    ])
    def test_normalize_base_path(self, base_path, expected):
        assert PathUtils.normalize_base_path(base_path) == expected

    @pytest.mark.parametrize('path, expected', [
        ('/CRMApi/api/v1/Thing', '/api/v1/Thing'),
        ('/CRMApi', '/'),
        ('/CRMApi/', '/'),
        ('/api/v1/Thing', '/api/v1/Thing'),
        ('/CRMApiX/Thing', '/CRMApiX/Thing'),
    ])
    def test_strip_base_path(self, path, expected):
        """Test the prefix is only removed on a segment boundary."""
        assert PathUtils.strip_base_path(path, '/CRMApi') == expected

    def test_strip_without_base_path(self):
        assert PathUtils.strip_base_path('/a/b', '') == '/a/b'
        assert PathUtils.strip_base_path('a/b', '') == '/a/b'

    @pytest.mark.parametrize('path, expected', [
        ('/swagger', True),
        ('/swagger/index.html', True),
        ('/CRMApi/swagger/index.html', True),
        ('/favicon.ico', True),
        ('/favicon.ico.bak', False),
        ('/api/swagger', False),
        ('/api/v1/Thing', False),
    ])
    def test_is_passthrough(self, path, expected):
        result = PathUtils.is_passthrough(path, '/CRMApi', ('/swagger',), ('/favicon.ico',))

        assert result is expected


class TestGetIgnoreCase:
    """Test case-insensitive mapping lookup."""

    def test_exact_key(self):
        assert get_ignore_case({'id': '1'}, 'id') == '1'

    def test_other_case(self):
        assert get_ignore_case({'ID': '7'}, 'id') == '7'
        assert get_ignore_case({'Id': '8'}, 'iD') == '8'

    def test_exact_match_preferred(self):
        assert get_ignore_case({'ID': 'upper', 'id': 'lower'}, 'id') == 'lower'

    def test_missing(self):
        assert get_ignore_case({'other': '1'}, 'id') is None
        assert get_ignore_case({}, 'id') is None
        assert get_ignore_case(None, 'id') is None


class TestDumpsJson:
    """Test JSON body serialization."""

    def test_indented(self):
        assert dumps_json({'a': [1, 2]}) == '{\n  "a": [\n    1,\n    2\n  ]\n}'

    def test_compact(self):
        assert dumps_json({'a': 1, 'b': None}, indent=None) == '{"a": 1, "b": null}'

    def test_non_ascii_kept(self):
        assert dumps_json('Grüße', indent=None) == '"Grüße"'

    def test_scalar_values(self):
        assert dumps_json(None) == 'null'
        assert dumps_json(True) == 'true'
        assert dumps_json(123.45) == '123.45'

    def test_unserializable_raises(self):
        with pytest.raises(TypeError):
            dumps_json({'bad': object()})


def test_utc_timestamp():
    """Test timestamps are timezone-aware ISO-8601."""
    parsed = datetime.fromisoformat(utc_timestamp())

    assert parsed.utcoffset().total_seconds() == 0
