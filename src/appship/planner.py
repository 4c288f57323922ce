"""Destination keys and public URLs for a build upload.

Every object of a build lands under ``{dest_base_dir}/{version}/{build_id}/``
and the names inside that directory are fixed, so uploading the same build
twice overwrites the same objects instead of creating new ones.
"""
from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
import posixpath

from .artifact import ArtifactMetadata, AssetGenerator, PublicLinks

LOGGER = logging.getLogger(__name__)


class AssetRole(str, enum.Enum):
    ICON = "icon"
    VERSION_MANIFEST = "version_manifest"
    INDEX_PAGE = "index_page"
    BINARY = "binary"
    PLATFORM_MANIFEST = "platform_manifest"


@dataclass(slots=True, frozen=True)
class UploadJob:
    """A single local file and the object key it is uploaded to."""

    bucket: str
    source_path: str
    destination_key: str
    role: AssetRole


@dataclass(slots=True, frozen=True)
class UploadPlan:
    jobs: tuple[UploadJob, ...]
    download_url: str
    manifest_url: str | None = None

    @property
    def links(self) -> PublicLinks:
        return PublicLinks(self.download_url, self.manifest_url)


def bucket_url(bucket: str) -> str:
    """Return the virtual-hosted-style HTTPS endpoint of ``bucket``."""
    return f"https://{bucket}.s3.amazonaws.com"


def public_url(bucket: str, key: str) -> str:
    return bucket_url(bucket) + "/" + key


def build_dir(dest_base_dir: str, version: str, build_id: str) -> str:
    return dest_base_dir + "/" + version + "/" + build_id


def compute_links(bucket: str, dest_base_dir: str, artifact: ArtifactMetadata) -> PublicLinks:
    """Return the URLs ``artifact`` will have once uploaded."""
    directory = build_dir(dest_base_dir, artifact.version, artifact.build_id)
    download_url = public_url(
        bucket, directory + "/" + posixpath.basename(artifact.source_file_path)
    )
    manifest_url = None
    if artifact.is_ios:
        manifest_url = public_url(
            bucket, directory + "/" + artifact.platform_manifest_name()
        )
    return PublicLinks(download_url, manifest_url)


def build_jobs(bucket: str, dest_base_dir: str, artifact: ArtifactMetadata) -> list[UploadJob]:
    """Return the ordered upload jobs for ``artifact``.

    Companion assets come from the artifact's assets directory, the binary from
    its own source path.
    """
    directory = build_dir(dest_base_dir, artifact.version, artifact.build_id)
    assets_dir = artifact.assets_dir

    def asset(name: str, role: AssetRole) -> UploadJob:
        return UploadJob(bucket, assets_dir + "/" + name, directory + "/" + name, role)

    binary_name = posixpath.basename(artifact.source_file_path)
    jobs = [
        asset(artifact.icon_file_name, AssetRole.ICON),
        asset(artifact.manifest_file_name, AssetRole.VERSION_MANIFEST),
        asset(artifact.index_page_file_name, AssetRole.INDEX_PAGE),
        UploadJob(bucket, artifact.source_file_path, directory + "/" + binary_name, AssetRole.BINARY),
    ]
    if artifact.is_ios:
        jobs.append(asset(artifact.platform_manifest_name(), AssetRole.PLATFORM_MANIFEST))
    return jobs


def plan_uploads(
    bucket: str,
    dest_base_dir: str,
    artifact: ArtifactMetadata,
    generator: AssetGenerator,
) -> UploadPlan:
    """Generate the companion assets and plan the upload of ``artifact``.

    Errors raised by ``generator`` propagate unchanged; nothing else can fail.
    """
    links = compute_links(bucket, dest_base_dir, artifact)
    generator.generate_assets(artifact, links)
    jobs = build_jobs(bucket, dest_base_dir, artifact)
    LOGGER.debug("Planned %d uploads for %s", len(jobs), links.download_url)
    return UploadPlan(tuple(jobs), links.download_url, links.manifest_url)


__all__ = [
    "AssetRole",
    "UploadJob",
    "UploadPlan",
    "bucket_url",
    "build_dir",
    "build_jobs",
    "compute_links",
    "plan_uploads",
    "public_url",
]
