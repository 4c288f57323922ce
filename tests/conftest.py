from __future__ import annotations

from pathlib import Path

import pytest

from appship.artifact import ArtifactMetadata, Platform


class FakeS3Client:
    """Records ``put_object`` calls and optionally fails on a given call."""

    def __init__(self, fail_on: int | None = None, error: Exception | None = None):
        self.calls: list[dict] = []
        self.fail_on = fail_on
        self.error = error

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise self.error
        return {"ETag": '"abc"'}


class RecordingGenerator:
    def __init__(self, error: Exception | None = None):
        self.calls = []
        self.error = error

    def generate_assets(self, artifact, links):
        self.calls.append((artifact, links))
        if self.error is not None:
            raise self.error


def write_assets(root: Path, platform: Platform, binary_name: str) -> ArtifactMetadata:
    assets = root / f"{platform.value}_assets"
    assets.mkdir()
    (assets / "appicon.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)
    (assets / "version.json").write_text('{"version": "1.2.0"}')
    (assets / "index.html").write_text("<html><body>install</body></html>")
    if platform is Platform.IOS:
        (assets / "app.plist").write_text('<?xml version="1.0"?><plist></plist>')
    binary = root / binary_name
    binary.write_bytes(b"PK\x03\x04" + b"\x00" * 32)
    return ArtifactMetadata.for_platform(
        version="1.2.0",
        build_id="45",
        source_file_path=str(binary),
        platform=platform,
        assets_dir=str(assets),
    )


@pytest.fixture
def android_artifact(tmp_path: Path) -> ArtifactMetadata:
    return write_assets(tmp_path, Platform.ANDROID, "build.apk")


@pytest.fixture
def ios_artifact(tmp_path: Path) -> ArtifactMetadata:
    return write_assets(tmp_path, Platform.IOS, "build.ipa")


@pytest.fixture
def make_client():
    return FakeS3Client


@pytest.fixture
def make_generator():
    return RecordingGenerator
