"""Uploads of generated files to a birdhole file host."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass

from .imaging import convert_png_to_jpg
from .request import Request, RequestError


@dataclass
class BirdholeConfig:
    """Where and how to upload files."""

    host: str = ""
    port: str = ""
    end_point: str = ""
    key: str = ""
    url_len: int = 0
    expiry: int = 0
    description: str = ""


def upload(
    file_name: str,
    message: str,
    fields: Iterable[tuple[str, str]] | None,
    config: BirdholeConfig,
) -> str:
    """Upload a file with a description and extra form fields; return its URL.

    PNG files are converted to JPEG first. The local file is removed after a
    successful upload.
    """
    file_name = convert_png_to_jpg(file_name)

    all_fields = [
        ("urllen", str(config.url_len)),
        ("expiry", str(config.expiry)),
        ("description", message),
        *(fields or []),
    ]
    request = Request(
        url=config.host + ":" + config.port + config.end_point,
        method="POST",
        headers=[("X-Auth-Token", config.key)],
        fields=all_fields,
        file_name=file_name,
    )
    text = request.call(as_text=True)
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise RequestError(f"invalid upload response: {exc}") from exc
    if not isinstance(data, dict) or not all(isinstance(v, str) or v is None for v in data.values()):
        raise RequestError("invalid upload response: expected an object of strings")

    try:
        os.remove(file_name)
    except OSError:
        pass

    return data.get("url") or ""