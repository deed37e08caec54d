"""
Tests for request body encoders and option normalization.
"""

import json
import os
import tempfile

import pytest

from deferred.config import TransportConfig
from deferred.core.errors import TransportError
from deferred.transport import FileField, RequestOptions
from deferred.transport.body import encode_body, encode_form, encode_json, encode_multipart


def test_encode_json():
    content_type, data = encode_json({"a": [1, 2], "b": None})

    assert content_type == "application/json; charset=UTF-8"
    assert json.loads(data.decode("utf-8")) == {"a": [1, 2], "b": None}


def test_encode_form_quotes_values():
    content_type, data = encode_form({"a": "1", "b": "x y&z"})

    assert content_type == "application/x-www-form-urlencoded"
    assert data == b"a=1&b=x+y%26z"


def test_encode_multipart_text_fields():
    content_type, data = encode_multipart({"name": "value", "n": 3}, boundary="XYZ")

    assert content_type == "multipart/form-data; boundary=XYZ"
    assert data == (
        b"--XYZ\r\n"
        b'Content-Disposition: form-data; name="name"\r\n\r\n'
        b"value\r\n"
        b"--XYZ\r\n"
        b'Content-Disposition: form-data; name="n"\r\n\r\n'
        b"3\r\n"
        b"--XYZ--\r\n"
    )


def test_encode_multipart_file_part():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "note.txt")
        with open(path, "wb") as f:
            f.write(b"file contents")

        _, data = encode_multipart({"upload": FileField(path)}, boundary="B")

    assert b'Content-Disposition: form-data; name="upload"; filename="note.txt"\r\n' in data
    assert b"Content-Type: text/plain\r\n\r\nfile contents\r\n" in data
    assert data.endswith(b"--B--\r\n")


def test_encode_multipart_accepts_file_dict_and_unknown_type():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "blob.zzqx")
        with open(path, "wb") as f:
            f.write(b"\x00\x01")

        _, data = encode_multipart({"blob": {"file": path}}, boundary="B")

    assert b'filename="blob.zzqx"' in data
    assert b"Content-Type: application/octet-stream\r\n\r\n\x00\x01\r\n" in data


def test_encode_multipart_default_boundary_is_unique():
    type_a, _ = encode_multipart({"a": "1"})
    type_b, _ = encode_multipart({"a": "1"})

    assert type_a != type_b


def test_encode_body_picks_the_given_kind():
    assert encode_body(RequestOptions(url="http://x")) is None
    assert encode_body(RequestOptions(url="http://x", body={"a": 1}))[0].startswith("application/json")
    assert encode_body(RequestOptions(url="http://x", form={"a": "1"}))[1] == b"a=1"


def test_normalized_fills_defaults():
    config = TransportConfig(timeout_seconds=4.0, follow_redirects=False)

    opts = RequestOptions(url="http://x", method=" post ").normalized(config)

    assert opts.method == "POST"
    assert opts.timeout == 4.0
    assert opts.follow_redirects is False


def test_normalized_zero_timeout_means_none():
    opts = RequestOptions(url="http://x", timeout=0).normalized(TransportConfig(timeout_seconds=9.0))

    assert opts.timeout is None


def test_normalized_requires_url():
    with pytest.raises(TransportError, match="no url"):
        RequestOptions().normalized(TransportConfig())


def test_normalized_rejects_multiple_body_kinds():
    opts = RequestOptions(url="http://x", body={"a": 1}, form={"b": "2"})

    with pytest.raises(TransportError, match="body, form"):
        opts.normalized(TransportConfig())
