"""
Request and response models for the HTTP transport.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from ..config import TransportConfig
from ..core.errors import TransportError

# Only these methods carry a request body
BODY_METHODS = ("POST", "PUT")


@dataclass(frozen=True)
class FileField:
    """
    File part of a multipart body.

    Fields:
        path: Path of the file to upload
        filename: Name sent to the server (default: basename of path)
        content_type: MIME type (default: guessed from the file name)
    """
    path: str
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class RequestOptions:
    """
    Options for a single request.

    Fields:
        url: Target URL (required)
        method: HTTP method, upper-cased on normalization
        timeout: Socket timeout in seconds (None = config default, 0 = no timeout)
        follow_redirects: Follow 3xx responses (None = config default)
        headers: Extra request headers, override the defaults
        json: Parse the response body as JSON
        full_response: Settle with a Response instead of the body alone
        body: JSON-serialized request body
        form: urlencoded request body
        multipart: multipart/form-data body (field -> value or FileField)
    """
    url: str = ""
    method: str = "GET"
    timeout: Optional[float] = None
    follow_redirects: Optional[bool] = None
    headers: Dict[str, str] = field(default_factory=dict)
    json: bool = False
    full_response: bool = False
    body: Any = None
    form: Optional[Dict[str, Any]] = None
    multipart: Optional[Dict[str, Any]] = None

    def normalized(self, config: TransportConfig) -> "RequestOptions":
        """
        Validate and fill defaults from config.

        Raises:
            TransportError: If url is missing or more than one body kind is set
        """
        if not self.url:
            raise TransportError("no url specified")

        kinds = [k for k in ("body", "form", "multipart") if getattr(self, k) is not None]
        if len(kinds) > 1:
            raise TransportError(f"only one of body/form/multipart allowed, got {', '.join(kinds)}")

        timeout = self.timeout if self.timeout is not None else config.timeout_seconds
        follow = self.follow_redirects if self.follow_redirects is not None else config.follow_redirects

        return replace(
            self,
            method=(self.method or "GET").strip().upper(),
            timeout=timeout or None,
            follow_redirects=follow,
            headers=dict(self.headers or {}),
        )


@dataclass(frozen=True)
class Response:
    """
    Full response record, delivered when full_response is set.

    Fields:
        status: HTTP status code (non-2xx included)
        message: Reason phrase
        headers: Response headers
        body: Decoded text, or parsed JSON when json is set
    """
    status: int
    message: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
