"""
HTTP transport that settles deferred values from a worker thread.
"""

from .models import FileField, RequestOptions, Response
from .body import encode_body, encode_form, encode_json, encode_multipart
from .fetch import fetch, request

__all__ = [
    "FileField",
    "RequestOptions",
    "Response",
    "encode_body",
    "encode_form",
    "encode_json",
    "encode_multipart",
    "fetch",
    "request",
]
