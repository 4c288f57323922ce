"""Artifact metadata and the asset generation contract."""
from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
from pathlib import Path
from typing import Protocol

LOGGER = logging.getLogger(__name__)

# File names written by the artifact parser and reused as object names.
APP_ICON_FILE = "appicon.png"
VERSION_JSON_FILE = "version.json"
INDEX_HTML_FILE = "index.html"
IOS_PLIST_FILE = "app.plist"

ANDROID_ASSETS_DIR = "android_assets"
IOS_ASSETS_DIR = "ios_assets"


class Platform(str, enum.Enum):
    IOS = "ios"
    ANDROID = "android"

    @classmethod
    def from_file(cls, path: str) -> "Platform":
        """Infer the platform from a binary's extension."""
        suffix = Path(path).suffix.lower()
        if suffix == ".ipa":
            return cls.IOS
        if suffix == ".apk":
            return cls.ANDROID
        raise ValueError(f"Cannot infer platform from file extension: {path}")


@dataclass(slots=True, frozen=True)
class ArtifactMetadata:
    """Describe one mobile build and the companion files generated for it.

    ``assets_dir`` and ``platform_manifest_file_name`` default to the values
    for ``platform``; an iOS build always carries a plist manifest.
    """

    version: str
    build_id: str
    source_file_path: str
    platform: Platform
    assets_dir: str | None = None
    icon_file_name: str = APP_ICON_FILE
    manifest_file_name: str = VERSION_JSON_FILE
    index_page_file_name: str = INDEX_HTML_FILE
    platform_manifest_file_name: str | None = None

    def __post_init__(self) -> None:
        platform = Platform(self.platform)
        object.__setattr__(self, "platform", platform)
        if self.assets_dir is None:
            default_dir = IOS_ASSETS_DIR if platform is Platform.IOS else ANDROID_ASSETS_DIR
            object.__setattr__(self, "assets_dir", default_dir)
        if platform is Platform.IOS:
            if self.platform_manifest_file_name is None:
                object.__setattr__(self, "platform_manifest_file_name", IOS_PLIST_FILE)
            if not self.platform_manifest_file_name:
                raise ValueError("iOS artifacts require a platform manifest file name")

    @property
    def is_ios(self) -> bool:
        return self.platform is Platform.IOS

    @classmethod
    def for_platform(
        cls,
        *,
        version: str,
        build_id: str,
        source_file_path: str,
        platform: Platform,
        assets_dir: str | None = None,
    ) -> "ArtifactMetadata":
        """Build metadata with the default file names for ``platform``."""
        return cls(
            version=version,
            build_id=build_id,
            source_file_path=source_file_path,
            platform=platform,
            assets_dir=assets_dir or None,
        )

    def asset_names(self) -> list[str]:
        names = [self.icon_file_name, self.manifest_file_name, self.index_page_file_name]
        if self.is_ios:
            names.append(self.platform_manifest_name())
        return names

    def platform_manifest_name(self) -> str:
        if not self.is_ios or not self.platform_manifest_file_name:
            raise ValueError(f"{self.platform.value} artifacts have no platform manifest")
        return self.platform_manifest_file_name


@dataclass(slots=True, frozen=True)
class PublicLinks:
    """Public URLs a build will have once uploaded."""

    download_url: str
    manifest_url: str | None = None


class AssetGenerator(Protocol):
    """Writes the icon, version manifest and index page for an artifact.

    Receives the links computed for the build so the install page can point at
    them. Any exception raised aborts the upload before it starts.
    """

    def generate_assets(self, artifact: ArtifactMetadata, links: PublicLinks) -> None:
        ...


class PrebuiltAssets:
    """Generator for assets an external parser has already written."""

    def generate_assets(self, artifact: ArtifactMetadata, links: PublicLinks) -> None:
        assets_dir = Path(artifact.assets_dir)
        missing = [
            str(assets_dir / name)
            for name in artifact.asset_names()
            if not (assets_dir / name).is_file()
        ]
        if missing:
            raise FileNotFoundError(f"Generated assets not found: {', '.join(missing)}")
        LOGGER.info("Using prebuilt assets in %s for %s", assets_dir, links.download_url)


__all__ = [
    "ANDROID_ASSETS_DIR",
    "APP_ICON_FILE",
    "ArtifactMetadata",
    "AssetGenerator",
    "INDEX_HTML_FILE",
    "IOS_ASSETS_DIR",
    "IOS_PLIST_FILE",
    "Platform",
    "PrebuiltAssets",
    "PublicLinks",
    "VERSION_JSON_FILE",
]
