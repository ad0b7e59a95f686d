"""
oasmock URL Utilities

Shared path splitting, base-path handling and passthrough checks.
"""

from typing import Iterable, List


class PathUtils:
    """Handles request-path normalization for template matching."""

    @staticmethod
    def split_segments(path: str) -> List[str]:
        """
        Split a path into segments after trimming surrounding slashes.

        '/api/v1/Thing/' and 'api/v1/Thing' both give ['api', 'v1', 'Thing'];
        the root path gives a single empty segment.
        """
        return path.strip('/').split('/')

    @staticmethod
    def is_capture(segment: str) -> bool:
        """Check if a template segment is a '{name}' capture."""
        return segment.startswith('{') and segment.endswith('}')

    @staticmethod
    def capture_name(segment: str) -> str:
        """Name of a '{name}' capture segment."""
        return segment.strip('{}')

    @staticmethod
    def normalize_base_path(base_path: str) -> str:
        """
        Normalize a mount prefix to '/prefix' form.

        Empty and '/' both mean no prefix.
        """
        base_path = (base_path or '').strip().rstrip('/')
        if base_path and not base_path.startswith('/'):
            base_path = '/' + base_path
        return base_path

    @staticmethod
    def strip_base_path(path: str, base_path: str) -> str:
        """
        Remove the mount prefix from a request path, if present.

        The prefix only matches on a segment boundary, so '/CRMApiX' is left
        alone when the base path is '/CRMApi'.

        Args:
            path: Incoming request path
            base_path: Configured mount prefix

        Returns:
            Path relative to the mount prefix, always starting with '/'
        """
        base_path = PathUtils.normalize_base_path(base_path)
        if base_path and (path == base_path or path.startswith(base_path + '/')):
            path = path[len(base_path):]
        return path if path.startswith('/') else '/' + path

    @staticmethod
    def is_passthrough(
        path: str,
        base_path: str,
        prefixes: Iterable[str],
        exact_paths: Iterable[str]
    ) -> bool:
        """
        Check if a request path is reserved for other handlers.

        Reserved paths are documentation routes (also under the mount
        prefix) and static files like the favicon.

        Args:
            path: Raw request path, before base-path stripping
            base_path: Configured mount prefix
            prefixes: Reserved path prefixes (e.g. '/swagger')
            exact_paths: Reserved exact paths (e.g. '/favicon.ico')

        Returns:
            True if the mock must not handle the request
        """
        if path in exact_paths:
            return True

        base_path = PathUtils.normalize_base_path(base_path)
        for prefix in prefixes:
            if path.startswith(prefix):
                return True
            if base_path and path.startswith(base_path + prefix):
                return True
        return False
