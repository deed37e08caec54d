"""
Request body encoders.

Each encoder returns (content_type, bytes).
"""

import json
import mimetypes
import os
import uuid
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

from .models import FileField, RequestOptions

Encoded = Tuple[str, bytes]


def encode_json(obj: Any) -> Encoded:
    return "application/json; charset=UTF-8", json.dumps(obj).encode("utf-8")


def encode_form(fields: Dict[str, Any]) -> Encoded:
    return "application/x-www-form-urlencoded", urlencode(fields).encode("utf-8")


def _as_file_field(value: Any) -> Optional[FileField]:
    if isinstance(value, FileField):
        return value
    if isinstance(value, dict) and "file" in value:
        return FileField(path=value["file"])
    return None


def encode_multipart(fields: Dict[str, Any], boundary: Optional[str] = None) -> Encoded:
    """
    Encode fields as multipart/form-data.

    Args:
        fields: Field name -> value; FileField (or {"file": path}) values are
            sent as file parts, anything else as str(value)
        boundary: Part boundary (default: random uuid4)
    """
    boundary = boundary or str(uuid.uuid4())
    parts = []

    for name, value in fields.items():
        parts.append(f"--{boundary}\r\n".encode("utf-8"))

        file_field = _as_file_field(value)
        if file_field is None:
            parts.append(f'Content-Disposition: form-data; name="{name}"\r\n\r\n'.encode("utf-8"))
            parts.append(f"{value}\r\n".encode("utf-8"))
            continue

        filename = file_field.filename or os.path.basename(file_field.path)
        content_type = (
            file_field.content_type
            or mimetypes.guess_type(filename)[0]
            or "application/octet-stream"
        )
        with open(file_field.path, "rb") as f:
            data = f.read()

        parts.append(
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'.encode("utf-8")
        )
        parts.append(f"Content-Type: {content_type}\r\n\r\n".encode("utf-8"))
        parts.append(data)
        parts.append(b"\r\n")

    parts.append(f"--{boundary}--\r\n".encode("utf-8"))
    return f"multipart/form-data; boundary={boundary}", b"".join(parts)


def encode_body(options: RequestOptions) -> Optional[Encoded]:
    """Encode whichever body kind options carries, or None."""
    if options.multipart is not None:
        return encode_multipart(options.multipart)
    if options.form is not None:
        return encode_form(options.form)
    if options.body is not None:
        return encode_json(options.body)
    return None
