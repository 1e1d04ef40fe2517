"""Image helpers: PNG to JPEG conversion, URL extraction and image URL checks."""

from __future__ import annotations

import io
import re
from pathlib import Path

import requests
from PIL import Image

from . import logger

_URL_RE = re.compile(r"https?://[^\t\n\f\r /$.?#].[^\t\n\f\r ]*")

_SNIFF_LEN = 512
_WHITESPACE = b"\t\n\x0c\r "
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)
_HTML_TAGS = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)
_PREFIXES = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b".snd", "audio/basic"),
    (b"OggS\x00", "application/ogg"),
    (b"MThd\x00\x00\x00\x06", "audio/midi"),
    (b"ID3", "audio/mpeg"),
    (b"\x1a\x45\xdf\xa3", "video/webm"),
    (b"\x52\x61\x72\x20\x1a\x07\x00", "application/x-rar-compressed"),
    (b"\x52\x61\x72\x20\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00\x61\x73\x6d", "application/wasm"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
)


def _sniff_content_type(data: bytes) -> str:
    """Guess a MIME type from the leading bytes of some content."""
    head = data[:_SNIFF_LEN]
    stripped = head.lstrip(_WHITESPACE)
    for tag in _HTML_TAGS:
        if (
            len(stripped) > len(tag)
            and stripped[: len(tag)].upper() == tag
            and stripped[len(tag)] in b" >"
        ):
            return "text/html; charset=utf-8"
    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    for prefix, content_type in _PREFIXES:
        if head.startswith(prefix):
            return content_type
    if head[:4] == b"RIFF":
        if head[8:14] == b"WEBPVP":
            return "image/webp"
        if head[8:12] == b"WAVE":
            return "audio/wave"
        if head[8:12] == b"AVI ":
            return "video/avi"
    if head[4:8] == b"ftyp" and head[8:11] == b"mp4":
        return "video/mp4"
    if not any(byte in _BINARY_BYTES for byte in head):
        return "text/plain; charset=utf-8"
    return "application/octet-stream"


def to_jpeg(data: bytes) -> bytes:
    """Re-encode PNG image bytes as JPEG; ValueError for anything else."""
    content_type = _sniff_content_type(data)
    if content_type != "image/png":
        raise ValueError(f"unable to convert {content_type!r} to jpeg")
    with Image.open(io.BytesIO(data)) as img:
        rgb = img.convert("RGB")
    out = io.BytesIO()
    rgb.save(out, format="JPEG", quality=75)
    return out.getvalue()


def convert_png_to_jpg(file_name: str) -> str:
    """Replace a .png file in the working directory with a .jpg copy.

    Names not ending in .png are returned unchanged. Names containing '..'
    or '/' are refused with ValueError.
    """
    if not file_name.endswith(".png"):
        return file_name
    if ".." in file_name or "/" in file_name:
        logger.error("Invalid file path", file=file_name)
        raise ValueError(f"invalid file path: {file_name}")

    source = Path(file_name)
    try:
        jpeg = to_jpeg(source.read_bytes())
    except (OSError, ValueError) as exc:
        logger.error("Failed to convert image", file=file_name, error=str(exc))
        raise

    target = source.with_suffix(".jpg")
    target.write_bytes(jpeg)
    target.chmod(0o600)
    source.unlink(missing_ok=True)
    return str(target)


def extract_urls(text: str) -> list[str]:
    """All http and https URLs in the text, in order."""
    return _URL_RE.findall(text)


def is_image_url(url: str) -> bool:
    """Whether a HEAD request reports an image content type."""
    if not url.startswith(("http://", "https://")):
        logger.error("Invalid URL scheme", url=url)
        return False
    try:
        response = requests.head(url, allow_redirects=True, timeout=30)
    except requests.RequestException as exc:
        logger.error("Error checking image URL", url=url, error=str(exc))
        return False
    return response.headers.get("Content-Type", "").startswith("image/")