"""Content-type detection for uploaded files.

``detect_content_type`` follows the WHATWG MIME sniffing signatures and only
looks at the first ``SNIFF_LEN`` bytes. Unknown binary data is reported as
``application/octet-stream``; anything without binary control bytes is plain
UTF-8 text.
"""
from __future__ import annotations

from typing import Callable

SNIFF_LEN = 512

HTML_CONTENT_TYPE = "text/html"
APK_CONTENT_TYPE = "application/vnd.android.package-archive"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

_WHITESPACE = b"\t\n\x0c\r "

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

_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)

Matcher = Callable[[bytes], bool]


def _skip_whitespace(data: bytes) -> bytes:
    return data.lstrip(_WHITESPACE)


def _match_html(data: bytes) -> bool:
    data = _skip_whitespace(data)
    for tag in _HTML_TAGS:
        if len(data) < len(tag) + 1:
            continue
        if data[: len(tag)].upper() != tag:
            continue
        if data[len(tag)] in b" >":
            return True
    return False


def _match_xml(data: bytes) -> bool:
    return _skip_whitespace(data).startswith(b"<?xml")


def _prefix(pattern: bytes, *, min_length: int = 0) -> Matcher:
    """Match ``pattern`` at the start of at least ``min_length`` bytes."""

    def match(data: bytes) -> bool:
        return len(data) >= min_length and data.startswith(pattern)

    return match


def _at(offset: int, pattern: bytes) -> Matcher:
    def match(data: bytes) -> bool:
        return data[offset : offset + len(pattern)] == pattern

    return match


def _container(magic: bytes, tag: bytes) -> Matcher:
    """RIFF/FORM style container with a format tag at offset 8."""

    def match(data: bytes) -> bool:
        return data.startswith(magic) and data[8 : 8 + len(tag)] == tag

    return match


def _match_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if box_size % 4 != 0 or len(data) < box_size or data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            # Skip the minor version field.
            continue
        if data[start : start + 3] == b"mp4":
            return True
    return False


def _match_text(data: bytes) -> bool:
    return not any(byte in _BINARY_BYTES for byte in data)


# Checked in order; the first match wins.
_SIGNATURES: tuple[tuple[Matcher, str], ...] = (
    (_match_html, "text/html; charset=utf-8"),
    (_match_xml, "text/xml; charset=utf-8"),
    (_prefix(b"%PDF-"), "application/pdf"),
    (_prefix(b"%!PS-Adobe-"), "application/postscript"),
    # UTF-16 byte order marks only count with two more bytes behind them.
    (_prefix(b"\xfe\xff", min_length=4), "text/plain; charset=utf-16be"),
    (_prefix(b"\xff\xfe", min_length=4), "text/plain; charset=utf-16le"),
    (_prefix(b"\xef\xbb\xbf"), TEXT_CONTENT_TYPE),
    (_prefix(b"\x00\x00\x01\x00"), "image/x-icon"),
    (_prefix(b"\x00\x00\x02\x00"), "image/x-icon"),
    (_prefix(b"BM"), "image/bmp"),
    (_prefix(b"GIF87a"), "image/gif"),
    (_prefix(b"GIF89a"), "image/gif"),
    (_container(b"RIFF", b"WEBPVP"), "image/webp"),
    (_prefix(b"\x89PNG\r\n\x1a\n"), "image/png"),
    (_prefix(b"\xff\xd8\xff"), "image/jpeg"),
    (_container(b"FORM", b"AIFF"), "audio/aiff"),
    (_prefix(b"ID3"), "audio/mpeg"),
    (_prefix(b"OggS\x00"), "application/ogg"),
    (_prefix(b"MThd\x00\x00\x00\x06"), "audio/midi"),
    (_container(b"RIFF", b"AVI "), "video/avi"),
    (_container(b"RIFF", b"WAVE"), "audio/wave"),
    (_match_mp4, "video/mp4"),
    (_prefix(b"\x1a\x45\xdf\xa3"), "video/webm"),
    (_at(34, b"LP"), "application/vnd.ms-fontobject"),
    (_prefix(b"\x00\x01\x00\x00"), "font/ttf"),
    (_prefix(b"OTTO"), "font/otf"),
    (_prefix(b"ttcf"), "font/collection"),
    (_prefix(b"wOFF"), "font/woff"),
    (_prefix(b"wOF2"), "font/woff2"),
    (_prefix(b"\x1f\x8b\x08"), "application/x-gzip"),
    (_prefix(b"PK\x03\x04"), "application/zip"),
    (_prefix(b"Rar!\x1a\x07\x00"), "application/x-rar-compressed"),
    (_prefix(b"Rar!\x1a\x07\x01\x00"), "application/x-rar-compressed"),
    (_prefix(b"\x00asm"), "application/wasm"),
    (_match_text, TEXT_CONTENT_TYPE),
)


def detect_content_type(data: bytes) -> str:
    """Return the sniffed content type of ``data``. Never fails."""
    data = data[:SNIFF_LEN]
    for matcher, content_type in _SIGNATURES:
        if matcher(data):
            return content_type
    return DEFAULT_CONTENT_TYPE


def content_type_for(source_path: str, data: bytes) -> str:
    """Pick the content type an uploaded object is served with.

    The sniffed type is overridden when the source path merely *contains*
    ``"html"`` or ``"apk"``; later overrides win.
    """
    content_type = detect_content_type(data)
    if "html" in source_path:
        content_type = HTML_CONTENT_TYPE
    if "apk" in source_path:
        content_type = APK_CONTENT_TYPE
    return content_type


__all__ = [
    "APK_CONTENT_TYPE",
    "DEFAULT_CONTENT_TYPE",
    "HTML_CONTENT_TYPE",
    "SNIFF_LEN",
    "TEXT_CONTENT_TYPE",
    "content_type_for",
    "detect_content_type",
]
