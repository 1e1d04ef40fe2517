"""A small HTTP request description with JSON, multipart and download support."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests

from . import logger
from .imaging import _sniff_content_type

MAX_IMAGE_BYTES = 5 * 1024 * 1024
_SNIFF_LEN = 512

_EXTENSION_TYPES = (
    ((".jpg", ".jpeg"), "image/jpeg"),
    ((".png",), "image/png"),
    ((".txt",), "text/plain"),
    ((".webp",), "image/webp"),
    ((".webm",), "video/webm"),
)


class RequestError(Exception):
    """An HTTP request could not be built, sent or understood."""


def file_content_type(path: str | os.PathLike[str]) -> str:
    """MIME type of a file from its first 512 bytes, falling back on its extension.

    Raises ValueError for an empty file.
    """
    with open(path, "rb") as fh:
        head = fh.read(_SNIFF_LEN)
    if not head:
        raise ValueError("EOF")
    content_type = _sniff_content_type(head.ljust(_SNIFF_LEN, b"\x00"))
    if content_type == "application/octet-stream":
        lowered = str(path).lower()
        for suffixes, guessed in _EXTENSION_TYPES:
            if lowered.endswith(suffixes):
                content_type = guessed
    return content_type


@dataclass
class Request:
    """An outgoing request: a file upload with form fields, a JSON post, or a plain call."""

    url: str
    method: str = "GET"
    file_name: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    fields: list[tuple[str, str]] = field(default_factory=list)
    payload: Any = None

    def add_header(self, key: str, value: str) -> None:
        self.headers.append((key, value))

    def _send(self, **kwargs: Any) -> requests.Response:
        try:
            return requests.request(self.method, self.url, headers=dict(self.headers), timeout=300, **kwargs)
        except requests.RequestException as exc:
            raise RequestError(f"failed to execute request: {exc}") from exc

    def call(self, as_text: bool = False) -> Any:
        """Send the request and return the body as text or decoded JSON.

        With a file name the file and fields go as multipart form data; a POST
        without one sends the payload as JSON.
        """
        if self.file_name:
            try:
                content_type = file_content_type(self.file_name)
            except OSError as exc:
                raise RequestError(f"failed to open file: {exc}") from exc
            except ValueError as exc:
                raise RequestError(f"failed to get content type: {exc}") from exc
            with open(self.file_name, "rb") as fh:
                parts: list[tuple[str, Any]] = [
                    ("file", (Path(self.file_name).name, fh, content_type)),
                    *((key, (None, value)) for key, value in self.fields),
                ]
                response = self._send(files=parts)
        elif self.method == "POST":
            try:
                body = json.dumps(self.payload).encode()
            except (TypeError, ValueError) as exc:
                raise RequestError(f"failed to marshal JSON: {exc}") from exc
            response = self._send(data=body)
        else:
            response = self._send()

        if as_text:
            return response.text
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Failed to decode JSON response", error=str(exc))
            raise RequestError(f"failed to decode JSON response: {exc}") from exc

    def download(self) -> None:
        """Fetch the URL and write the body to file_name."""
        try:
            response = requests.get(self.url, stream=True, timeout=300)
        except requests.RequestException as exc:
            raise RequestError(str(exc)) from exc
        with response:
            if response.status_code != 200:
                raise RequestError("received non 200 response code")
            with open(self.file_name, "wb") as fh:
                for chunk in response.iter_content(chunk_size=65536):
                    fh.write(chunk)


def is_image(url: str) -> bool:
    """Whether a HEAD request reports an image of at most 5MB."""
    if not url.startswith(("http://", "https://")):
        logger.error("Invalid URL scheme", url=url)
        return False
    try:
        response = requests.head(url, allow_redirects=True, timeout=30)
    except requests.RequestException as exc:
        logger.error("Error checking image URL", url=url, error=str(exc))
        return False
    content_type = response.headers.get("Content-Type", "")
    try:
        length = int(response.headers.get("Content-Length", ""))
    except ValueError:
        length = 0
    return content_type.startswith("image/") and length <= MAX_IMAGE_BYTES