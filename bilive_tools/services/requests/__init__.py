"""
Request building and execution package.

headers_for / normalize_options are pure; RequestExecutor sends the request.
"""

from .executor import RequestExecutor, merge_headers
from .headers import headers_for
from .normalizer import normalize_options

__all__ = [
    "RequestExecutor",
    "merge_headers",
    "headers_for",
    "normalize_options",
]
