"""
oasmock Operation Matcher

Finds the operation of an OpenAPI document that an incoming request targets.

Matching rules:
- Template and request are split on '/' after trimming surrounding slashes
- Segment counts must be equal
- '{name}' segments capture any value, literal segments compare ignoring case
- The first template in document order that matches and declares the
  request method wins; there is no specificity ranking
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..common import PathUtils
from ..openapi import Document, Operation, Response


@dataclass
class MatchResult:
    """Result of matching a request against the document."""

    matched: bool
    template: Optional[str] = None
    method: str = ''
    operation: Optional[Operation] = None
    path_params: Dict[str, str] = field(default_factory=dict)
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'matched': self.matched,
            'template': self.template,
            'method': self.method,
            'path_params': dict(self.path_params),
            'reason': self.reason
        }


class OperationMatcher:
    """
    Matches requests to document operations by path template and method.

    The matcher holds no per-request state, so one instance can serve
    concurrent requests.

    Example:
        matcher = OperationMatcher(document)
        result = matcher.find_match('GET', '/api/v1/Thing/42')

        if result.matched:
            print(result.template, result.path_params)  # {'id': '42'}
    """

    def __init__(self, document: Document):
        """
        Initialize operation matcher.

        Args:
            document: Loaded OpenAPI document
        """
        self.document = document

    def find_match(self, method: str, path: str) -> MatchResult:
        """
        Find the operation for a request.

        Args:
            method: HTTP method, any case
            path: Request path with the mount prefix already removed

        Returns:
            MatchResult; unmatched results carry the reason
        """
        path_matched = False

        for template, path_item in self.document.paths.items():
            if self.match_template(template, path) is None:
                continue

            path_matched = True
            operation = path_item.get_operation(method)
            if operation is None:
                continue

            return MatchResult(
                matched=True,
                template=template,
                method=method.upper(),
                operation=operation,
                path_params=self.extract_path_parameters(template, path),
                reason=f"Matched {method.upper()} {template}"
            )

        if path_matched:
            reason = f"No {method.upper()} operation declared for {path}"
        else:
            reason = f"No path template matches {path}"
        return MatchResult(matched=False, method=method.upper(), reason=reason)

    @staticmethod
    def match_template(template: str, path: str) -> Optional[Dict[str, str]]:
        """
        Match a path against one template.

        Args:
            template: Path template, e.g. '/api/v1/Thing/{id}'
            path: Request path

        Returns:
            Captured parameters if the path matches, otherwise None
        """
        template_segments = PathUtils.split_segments(template)
        path_segments = PathUtils.split_segments(path)

        if len(template_segments) != len(path_segments):
            return None

        params: Dict[str, str] = {}
        for template_segment, path_segment in zip(template_segments, path_segments):
            if PathUtils.is_capture(template_segment):
                params[PathUtils.capture_name(template_segment)] = path_segment
            elif template_segment.lower() != path_segment.lower():
                return None

        return params

    @staticmethod
    def extract_path_parameters(template: str, path: str) -> Dict[str, str]:
        """
        Collect '{name}' captures in template order.

        Segments are aligned position by position; extra segments on either
        side are ignored.

        Example:
            extract_path_parameters('/{a}/{b}', '/x/y')  # {'a': 'x', 'b': 'y'}
        """
        params: Dict[str, str] = {}
        for template_segment, path_segment in zip(
            PathUtils.split_segments(template),
            PathUtils.split_segments(path)
        ):
            if PathUtils.is_capture(template_segment):
                params[PathUtils.capture_name(template_segment)] = path_segment
        return params

    @staticmethod
    def select_success_response(operation: Operation) -> Optional[Tuple[str, Response]]:
        """
        Pick the first 2xx response in document order.

        Returns:
            (status key, Response) or None if the operation has no 2xx response
        """
        for status, response in operation.responses.items():
            if status.startswith('2'):
                return status, response
        return None

    @staticmethod
    def status_code(status: str) -> int:
        """Numeric status for a response key; range keys like '2XX' give 200."""
        return int(status) if status.isdigit() else 200
