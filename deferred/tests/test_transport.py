"""
Tests for the threaded HTTP transport against a local server.
"""

import json
import socket
import threading
import urllib.error

import pytest

from deferred.config import TransportConfig
from deferred.core import RejectedError, TransportError, result, wait
from deferred.transport import RequestOptions, Response, fetch, request


def test_fetch_text(http_server):
    assert result(fetch(f"{http_server}/text"), timeout=5) == ("hello",)


def test_fetch_json(http_server):
    (data,) = result(fetch(f"{http_server}/json", json=True), timeout=5)

    assert data == {"name": "deferred", "items": [1, 2, 3]}


def test_fetch_full_response(http_server):
    (response,) = result(fetch(f"{http_server}/json", json=True, full_response=True), timeout=5)

    assert isinstance(response, Response)
    assert response.status == 200
    assert response.ok
    assert response.message == "OK"
    assert response.headers["Content-Type"] == "application/json"
    assert response.body["items"] == [1, 2, 3]


def test_fetch_decompresses_gzip(http_server):
    assert result(fetch(f"{http_server}/gzip"), timeout=5) == ("compressed hello",)


def test_error_status_is_delivered_not_rejected(http_server):
    (response,) = result(fetch(f"{http_server}/missing", full_response=True), timeout=5)

    assert response.status == 404
    assert not response.ok
    assert response.body == "not found"


def test_redirects_followed_by_default(http_server):
    assert result(fetch(f"{http_server}/redirect"), timeout=5) == ("hello",)


def test_redirects_can_be_refused(http_server):
    (response,) = result(
        fetch(f"{http_server}/redirect", follow_redirects=False, full_response=True),
        timeout=5,
    )

    assert response.status == 302
    assert response.headers["Location"] == "/text"
    assert response.body == "moved"


def test_post_json_body(http_server):
    (echo,) = result(fetch(f"{http_server}/echo", method="post", body={"a": 1}, json=True), timeout=5)

    assert echo["method"] == "POST"
    assert echo["content_type"] == "application/json; charset=UTF-8"
    assert json.loads(echo["body"]) == {"a": 1}


def test_put_form_body(http_server):
    (echo,) = result(fetch(f"{http_server}/echo", method="PUT", form={"a": "1"}, json=True), timeout=5)

    assert echo["method"] == "PUT"
    assert echo["content_type"] == "application/x-www-form-urlencoded"
    assert echo["body"] == "a=1"


def test_post_multipart_body(http_server):
    (echo,) = result(fetch(f"{http_server}/echo", method="POST", multipart={"k": "v"}, json=True), timeout=5)

    assert echo["content_type"].startswith("multipart/form-data; boundary=")
    assert 'name="k"' in echo["body"]


def test_get_does_not_send_body(http_server):
    (echo,) = result(fetch(f"{http_server}/echo", body={"ignored": True}, json=True), timeout=5)

    assert echo["method"] == "GET"
    assert echo["body"] == ""
    assert echo["content_type"] is None


def test_default_and_custom_headers(http_server):
    config = TransportConfig(user_agent="deferred-tests/1.0")

    (echo,) = result(
        fetch(f"{http_server}/echo", config=config, headers={"X-Custom": "yes"}, json=True),
        timeout=5,
    )

    assert echo["user_agent"] == "deferred-tests/1.0"
    assert echo["accept_encoding"] == "gzip"
    assert echo["x_custom"] == "yes"


def test_missing_url_rejects_synchronously():
    dv = fetch("")

    assert dv.is_rejected
    assert isinstance(dv.payload[0], TransportError)


def test_unknown_option_rejects():
    dv = fetch("http://127.0.0.1/", not_an_option=True)

    assert dv.is_rejected
    assert isinstance(dv.payload[0], TypeError)


def test_connection_refused_rejects():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]

    with pytest.raises(RejectedError) as excinfo:
        result(fetch(f"http://127.0.0.1:{port}/", timeout=2), timeout=10)

    assert isinstance(excinfo.value.reasons[0], urllib.error.URLError)


def test_timeout_rejects(http_server):
    dv = fetch(f"{http_server}/slow?delay=1.0", timeout=0.1)

    snap = wait(dv, timeout=5)

    assert dv.is_rejected
    assert isinstance(snap.payload[0], OSError)


def test_request_settles_from_worker_thread(http_server):
    settled = threading.Event()
    seen = []

    def resolve(*values):
        seen.append((threading.current_thread().name, values))
        settled.set()

    thread = request(RequestOptions(url=f"{http_server}/text"), resolve, lambda *r: settled.set())

    assert thread is not None
    assert settled.wait(5)
    thread.join(5)
    assert seen[0][0].startswith("deferred-request-")
    assert seen[0][1] == ("hello",)


def test_request_returns_none_for_invalid_options():
    reasons = []

    thread = request(RequestOptions(), lambda *v: None, lambda *r: reasons.extend(r))

    assert thread is None
    assert isinstance(reasons[0], TransportError)


def test_invalid_json_rejects(http_server):
    with pytest.raises(RejectedError) as excinfo:
        result(fetch(f"{http_server}/text", json=True), timeout=5)

    assert isinstance(excinfo.value.reasons[0], json.JSONDecodeError)
