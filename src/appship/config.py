"""Configuration helpers for artifact uploads."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
import json
from pathlib import Path
from typing import Any, Mapping

from .artifact import ANDROID_ASSETS_DIR, IOS_ASSETS_DIR, Platform

_OPTIONAL_SETTINGS = frozenset({"bucket", "region", "profile"})


@dataclass(slots=True, frozen=True)
class UploadSettings:
    """Runtime configuration for uploading a build to S3.

    Attributes
    ----------
    bucket : str | None
        Destination S3 bucket. Required before anything is uploaded.
    dest_base_dir : str
        Key prefix under which ``{version}/{build}`` directories are created.
    region : str | None
        AWS region for the client. The public URLs never include it.
    profile : str | None
        Named AWS profile used to build the session.
    acl : str
        Canned ACL applied to every object.
    server_side_encryption : str
        Server-side encryption algorithm for every object.
    android_assets_dir : str
        Local directory holding generated Android companion assets.
    ios_assets_dir : str
        Local directory holding generated iOS companion assets.
    """

    bucket: str | None = None
    dest_base_dir: str = "builds"
    region: str | None = None
    profile: str | None = None
    acl: str = "public-read"
    server_side_encryption: str = "AES256"
    android_assets_dir: str = ANDROID_ASSETS_DIR
    ios_assets_dir: str = IOS_ASSETS_DIR

    def assets_dir(self, platform: Platform) -> str:
        if platform is Platform.IOS:
            return self.ios_assets_dir
        return self.android_assets_dir

    def with_overrides(self, **overrides: Any) -> "UploadSettings":
        """Return a copy with every non-``None`` override applied."""
        updated = replace(self, **{k: v for k, v in overrides.items() if v is not None})
        updated.validate()
        return updated

    def validate(self) -> None:
        if not self.dest_base_dir.strip("/"):
            raise ValueError("dest_base_dir must not be empty")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "UploadSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError(f"Unknown upload settings: {', '.join(unknown)}")
        for key, value in mapping.items():
            if value is None and key in _OPTIONAL_SETTINGS:
                continue
            if not isinstance(value, str):
                raise ValueError(f"Upload setting {key!r} must be a string")
        settings = cls(**mapping)  # type: ignore[arg-type]
        settings.validate()
        return settings


def default_settings() -> UploadSettings:
    """Return the default upload configuration."""
    return UploadSettings()


def load_settings(path: Path) -> UploadSettings:
    """Load upload settings from a JSON file."""

    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError("Upload settings file must contain a JSON object")
    return UploadSettings.from_mapping(data)


__all__ = ["UploadSettings", "default_settings", "load_settings"]
