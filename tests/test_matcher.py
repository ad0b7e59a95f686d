"""
Tests for oasmock Operation Matcher

Tests matching requests to document operations including:
- Segment-count and literal matching
- Path parameter capture
- First-match-wins ordering
- Method lookup
- 2xx response selection
"""

import pytest

from oasmock.mock.matcher import MatchResult, OperationMatcher
from oasmock.openapi import Operation, Response
from oasmock.openapi.model import freeze


def _get(responses=None):
    return {'responses': responses or {'200': {'description': 'OK'}}}


@pytest.fixture
def matcher(load_document):
    """Matcher over a document with overlapping templates."""
    document = load_document({
        'openapi': '3.0.1',
        'paths': {
            '/api/v1/Thing/{id}': {'get': _get(), 'put': _get()},
            '/api/v1/Thing/special': {'get': _get(), 'post': _get()},
            '/api/v1/{a}/{b}': {'get': _get()},
            '/': {'get': _get()}
        }
    })
    return OperationMatcher(document)


class TestMatchTemplate:
    """Test matching a path against a single template."""

    def test_exact_literal_match(self):
        assert OperationMatcher.match_template('/api/v1/Thing', '/api/v1/Thing') == {}

    def test_literals_ignore_case(self):
        assert OperationMatcher.match_template('/api/v1/Thing', '/API/V1/thing') == {}

    def test_literal_mismatch(self):
        assert OperationMatcher.match_template('/api/v1/Thing', '/api/v1/Other') is None

    @pytest.mark.parametrize('path', [
        '/api/v1/Thing',
        '/api/v1/Thing/1/extra',
        '/api',
        '/',
    ])
    def test_segment_count_must_match(self, path):
        """Test paths with a different segment count never match."""
        assert OperationMatcher.match_template('/api/v1/Thing/{id}', path) is None

    def test_surrounding_slashes_trimmed(self):
        """Test leading and trailing slashes are ignored."""
        assert OperationMatcher.match_template('api/v1/Thing/{id}/', '/api/v1/Thing/7/') == {'id': '7'}

    def test_empty_segment_is_not_skipped(self):
        """Test doubled slashes keep an empty segment."""
        assert OperationMatcher.match_template('/a/b', '/a//b') is None

    def test_capture_binds_value(self):
        assert OperationMatcher.match_template('/Thing/{id}', '/Thing/42') == {'id': '42'}

    def test_root_template(self):
        assert OperationMatcher.match_template('/', '/') == {}
        assert OperationMatcher.match_template('/', '') == {}


class TestExtractPathParameters:
    """Test path parameter extraction."""

    def test_two_captures_in_template_order(self):
        """Test captures come back in template order."""
        params = OperationMatcher.extract_path_parameters('/{a}/{b}', '/x/y')

        assert params == {'a': 'x', 'b': 'y'}
        assert list(params) == ['a', 'b']

    def test_literals_not_captured(self):
        params = OperationMatcher.extract_path_parameters('/api/{version}/Thing/{id}', '/api/v2/Thing/9')

        assert params == {'version': 'v2', 'id': '9'}

    def test_raw_segment_values(self):
        """Test captured values are the literal path segment strings."""
        params = OperationMatcher.extract_path_parameters('/Thing/{id}', '/Thing/007')

        assert params == {'id': '007'}


class TestFindMatch:
    """Test finding the operation for a request."""

    def test_match_with_parameters(self, matcher):
        result = matcher.find_match('GET', '/api/v1/Thing/42')

        assert result.matched is True
        assert result.template == '/api/v1/Thing/{id}'
        assert result.path_params == {'id': '42'}
        assert result.operation is not None

    def test_first_matching_template_wins(self, matcher):
        """Test document order decides between overlapping templates."""
        result = matcher.find_match('GET', '/api/v1/Thing/special')

        assert result.template == '/api/v1/Thing/{id}'
        assert result.path_params == {'id': 'special'}

    def test_later_template_used_when_method_missing(self, matcher):
        """Test a matching template without the method is skipped."""
        result = matcher.find_match('POST', '/api/v1/Thing/special')

        assert result.matched is True
        assert result.template == '/api/v1/Thing/special'
        assert result.path_params == {}

    def test_method_ignores_case(self, matcher):
        result = matcher.find_match('put', '/api/v1/Thing/1')

        assert result.matched is True
        assert result.method == 'PUT'

    def test_method_not_declared(self, matcher):
        result = matcher.find_match('DELETE', '/api/v1/Thing/1')

        assert result.matched is False
        assert result.operation is None
        assert 'No DELETE operation' in result.reason

    def test_no_template_matches(self, matcher):
        result = matcher.find_match('GET', '/nothing/here/at/all/really')

        assert result.matched is False
        assert 'No path template matches' in result.reason

    def test_two_captures(self, matcher):
        result = matcher.find_match('GET', '/api/v1/x/y')

        assert result.template == '/api/v1/{a}/{b}'
        assert result.path_params == {'a': 'x', 'b': 'y'}

    def test_root_path(self, matcher):
        result = matcher.find_match('GET', '/')

        assert result.template == '/'

    def test_matching_is_deterministic(self, matcher):
        """Test the same request always selects the same operation."""
        first = matcher.find_match('GET', '/api/v1/Thing/special')
        second = matcher.find_match('GET', '/api/v1/Thing/special')

        assert first.template == second.template
        assert first.operation is second.operation

    def test_empty_document(self):
        from oasmock.openapi import Document

        result = OperationMatcher(Document.empty()).find_match('GET', '/anything')

        assert result.matched is False

    def test_result_to_dict(self, matcher):
        data = matcher.find_match('GET', '/api/v1/Thing/5').to_dict()

        assert data['matched'] is True
        assert data['template'] == '/api/v1/Thing/{id}'
        assert data['path_params'] == {'id': '5'}


class TestSelectSuccessResponse:
    """Test picking the response to mock."""

    def _operation(self, *codes):
        return Operation(responses=freeze({code: Response(description=code) for code in codes}))

    def test_first_2xx_in_document_order(self):
        """Test '201' wins over '200' when it comes first."""
        status, response = OperationMatcher.select_success_response(self._operation('400', '201', '200'))

        assert status == '201'
        assert response.description == '201'

    def test_200_first(self):
        status, _ = OperationMatcher.select_success_response(self._operation('200', '201'))

        assert status == '200'

    def test_no_success_response(self):
        assert OperationMatcher.select_success_response(self._operation('404', 'default')) is None

    def test_no_responses(self):
        assert OperationMatcher.select_success_response(Operation()) is None


class TestStatusCode:
    """Test converting response keys to status codes."""

    def test_numeric(self):
        assert OperationMatcher.status_code('201') == 201

    def test_range_key(self):
        assert OperationMatcher.status_code('2XX') == 200


def test_match_result_defaults():
    """Test an unmatched result is empty."""
    result = MatchResult(matched=False)

    assert result.template is None
    assert result.path_params == {}
