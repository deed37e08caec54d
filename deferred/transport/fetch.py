"""
Threaded request entry points.

request() performs one HTTP round trip on a daemon worker thread and settles
through the resolve/reject pair it is given. fetch() wraps it in a
DeferredValue.
"""

import json
import threading
import time
import uuid
from typing import Any, Callable, Optional

from ..config import TransportConfig
from ..core.errors import TransportError
from ..core.value import DeferredValue
from ..logging_config import get_logger
from ..metrics import track_request
from .connection import open_connection
from .models import RequestOptions, Response


def _settle_value(options: RequestOptions, response: Response) -> Any:
    body = json.loads(response.body) if options.json else response.body
    if options.full_response:
        return Response(
            status=response.status,
            message=response.message,
            headers=response.headers,
            body=body,
        )
    return body


def request(
    options: RequestOptions,
    resolve: Callable[..., None],
    reject: Callable[..., None],
    config: Optional[TransportConfig] = None,
) -> Optional[threading.Thread]:
    """
    Start a request that settles through resolve/reject.

    Exactly one of resolve(result) / reject(error) is called, from the worker
    thread. Invalid options are rejected synchronously.

    Args:
        options: Request options
        resolve: Called with the parsed JSON, the Response (full_response)
            or the decoded body text
        reject: Called with the exception that stopped the request
        config: Defaults for timeout, redirects and User-Agent (default: from env)

    Returns:
        The started worker thread, or None if options were rejected
    """
    config = config or TransportConfig.from_env()
    try:
        opts = options.normalized(config)
    except TransportError as ex:
        reject(ex)
        return None

    trace_id = uuid.uuid4().hex[:8]
    logger = get_logger(__name__, trace_id=trace_id)

    def worker() -> None:
        started = time.monotonic()
        logger.debug(f"{opts.method} {opts.url} started")
        try:
            response = open_connection(opts, config.user_agent)
            value = _settle_value(opts, response)
        except Exception as ex:
            elapsed = time.monotonic() - started
            logger.warning(f"{opts.method} {opts.url} failed after {elapsed:.3f}s: {ex}")
            track_request(opts.method, "rejected", elapsed)
            reject(ex)
            return

        elapsed = time.monotonic() - started
        logger.info(
            f"{opts.method} {opts.url} -> {response.status}",
            extra={"status": response.status, "elapsed": round(elapsed, 3)},
        )
        track_request(opts.method, "fulfilled", elapsed)
        resolve(value)

    thread = threading.Thread(target=worker, daemon=True, name=f"deferred-request-{trace_id}")
    thread.start()
    return thread


def fetch(url: str, config: Optional[TransportConfig] = None, **options: Any) -> DeferredValue:
    """
    Request url and return a DeferredValue for the result.

    Keyword options are RequestOptions fields; an unknown option rejects the
    returned value with TypeError.

    Example:
        fetch("https://example.com/api", json=True).then(print)
    """
    return DeferredValue(
        lambda resolve, reject: request(RequestOptions(url=url, **options), resolve, reject, config=config)
    )
