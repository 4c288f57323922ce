import pytest

from appship.sniff import (
    APK_CONTENT_TYPE,
    DEFAULT_CONTENT_TYPE,
    HTML_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    content_type_for,
    detect_content_type,
)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x89PNG\r\n\x1a\n\x00\x00", "image/png"),
        (b"PK\x03\x04rest-of-ipa", "application/zip"),
        (b'{"version": "1.2.0"}', TEXT_CONTENT_TYPE),
        (b'  <?xml version="1.0"?><plist/>', "text/xml; charset=utf-8"),
        (b"\n<!DOCTYPE html>\n<html>", "text/html; charset=utf-8"),
        (b"<htmlx", TEXT_CONTENT_TYPE),
        (b"%PDF-1.7", "application/pdf"),
        (b"\xff\xd8\xff\xe0", "image/jpeg"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"", TEXT_CONTENT_TYPE),
        (b"\x00\x01\x02\x03binary", DEFAULT_CONTENT_TYPE),
    ],
)
def test_detect_content_type(data, expected):
    assert detect_content_type(data) == expected


def test_detect_only_looks_at_prefix():
    assert detect_content_type(b"a" * 512 + b"\x00") == TEXT_CONTENT_TYPE


def test_html_in_path_overrides_sniffing():
    assert content_type_for("/assets/index.html", b"\x89PNG\r\n\x1a\n") == HTML_CONTENT_TYPE


def test_apk_in_path_overrides_sniffing():
    assert content_type_for("/tmp/build.apk", b"PK\x03\x04") == APK_CONTENT_TYPE


def test_apk_override_wins_over_html():
    assert content_type_for("/apk/index.html", b"<html>") == APK_CONTENT_TYPE


def test_override_is_a_substring_match():
    assert content_type_for("/tmp/htmlreport.txt", b"plain") == HTML_CONTENT_TYPE
    assert content_type_for("/tmp/apkinfo/notes.txt", b"plain") == APK_CONTENT_TYPE


def test_sniffed_type_used_without_override():
    assert content_type_for("/tmp/build.ipa", b"PK\x03\x04") == "application/zip"


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\xfe\xff", TEXT_CONTENT_TYPE),
        (b"\xff\xfe\x00", DEFAULT_CONTENT_TYPE),
        (b"\xfe\xff\x00h", "text/plain; charset=utf-16be"),
        (b"\xff\xfeh\x00", "text/plain; charset=utf-16le"),
    ],
)
def test_utf16_byte_order_marks_need_four_bytes(data, expected):
    assert detect_content_type(data) == expected


def test_embedded_opentype_font():
    assert detect_content_type(b"\x00" * 34 + b"LP" + b"\x00" * 8) == "application/vnd.ms-fontobject"


def test_embedded_opentype_checked_before_truetype():
    data = b"\x00\x01\x00\x00" + b"\x00" * 30 + b"LP"
    assert detect_content_type(data) == "application/vnd.ms-fontobject"


def test_images_win_over_embedded_opentype():
    data = b"\x89PNG\r\n\x1a\n" + b"\x00" * 26 + b"LP"
    assert detect_content_type(data) == "image/png"
