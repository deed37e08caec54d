"""
Blocking HTTP round trip on top of urllib.

Runs on the transport's worker thread. Non-2xx statuses are returned as
responses, not raised.
"""

import gzip
import urllib.error
import urllib.request
from typing import Dict

from .body import encode_body
from .models import BODY_METHODS, RequestOptions, Response


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


def build_opener(follow_redirects: bool) -> urllib.request.OpenerDirector:
    if follow_redirects:
        return urllib.request.build_opener()
    return urllib.request.build_opener(_NoRedirectHandler)


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


def build_request(options: RequestOptions, user_agent: str) -> urllib.request.Request:
    """
    Build the urllib request for normalized options.

    Caller headers override User-Agent and Accept-Encoding. Content-Type is
    only set from the body encoder when the caller did not give one.
    """
    headers = {"User-Agent": user_agent, "Accept-Encoding": "gzip"}
    headers.update(options.headers)

    data = None
    if options.method in BODY_METHODS:
        encoded = encode_body(options)
        if encoded is not None:
            content_type, data = encoded
            if not _has_header(headers, "Content-Type"):
                headers["Content-Type"] = content_type

    return urllib.request.Request(options.url, data=data, headers=headers, method=options.method)


def open_connection(options: RequestOptions, user_agent: str) -> Response:
    """
    Perform the request and read the whole response.

    Args:
        options: Normalized request options
        user_agent: Default User-Agent header

    Returns:
        Response with decoded text body

    Raises:
        urllib.error.URLError / OSError: On connection failure or timeout
    """
    req = build_request(options, user_agent)
    opener = build_opener(options.follow_redirects)

    try:
        resp = opener.open(req, timeout=options.timeout)
    except urllib.error.HTTPError as err:
        resp = err

    try:
        raw = resp.read()
        status = resp.getcode()
        message = resp.reason or ""
        headers = resp.headers
    finally:
        resp.close()

    if raw and (headers.get("Content-Encoding") or "").lower() == "gzip":
        raw = gzip.decompress(raw)

    charset = headers.get_content_charset() or "utf-8"
    return Response(
        status=status,
        message=str(message),
        headers=dict(headers.items()),
        body=raw.decode(charset, errors="replace"),
    )
