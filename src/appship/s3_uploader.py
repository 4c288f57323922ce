"""Upload planned build assets to S3.

Jobs run one after another. The first failure aborts the batch; objects that
were already written stay in the bucket.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping
from urllib.parse import quote, unquote_plus

from botocore.exceptions import BotoCoreError, ClientError

from .artifact import ArtifactMetadata, AssetGenerator
from .planner import AssetRole, UploadJob, UploadPlan, bucket_url, plan_uploads
from .sniff import content_type_for

LOGGER = logging.getLogger(__name__)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

UploadResult = dict[AssetRole, str]


class UploadError(RuntimeError):
    """The storage backend rejected an upload."""


class LocationDecodeError(ValueError):
    """An object location contained a malformed percent escape."""


class BatchUploadError(RuntimeError):
    """A batch stopped early; ``uploaded`` holds what made it to the bucket."""

    def __init__(self, job: UploadJob, uploaded: UploadResult, cause: BaseException):
        super().__init__(f"upload of {job.source_path} aborted the batch: {cause}")
        self.job = job
        self.uploaded = uploaded


def decode_location(location: str) -> str:
    """Undo the percent-encoding of an object location.

    ``+`` decodes to a space, and an escape that is not followed by two hex
    digits raises ``LocationDecodeError``.
    """
    match = _BAD_ESCAPE.search(location)
    if match:
        raise LocationDecodeError(
            f"invalid URL escape {location[match.start():match.start() + 3]!r}"
        )
    return unquote_plus(location)


def object_location(bucket: str, key: str) -> str:
    """Return the percent-encoded URL S3 reports for ``key``."""
    return bucket_url(bucket) + "/" + quote(key, safe="/~")


class S3Uploader:
    """Put single files into S3 as public, encrypted objects.

    Parameters
    ----------
    client:
        A ``boto3`` S3 client, usually from ``appship.aws.create_s3_client``.
    acl:
        Canned ACL applied to each object.
    server_side_encryption:
        Encryption algorithm requested for each object.
    """

    def __init__(
        self,
        client: Any,
        *,
        acl: str = "public-read",
        server_side_encryption: str = "AES256",
    ) -> None:
        self.client = client
        self.acl = acl
        self.server_side_encryption = server_side_encryption

    def upload(self, job: UploadJob) -> str:
        """Upload ``job`` and return the decoded public URL of the object.

        The whole file is read into memory first. ``OSError`` from reading it
        propagates unchanged.
        """
        body = Path(job.source_path).read_bytes()
        content_type = content_type_for(job.source_path, body)
        LOGGER.info(
            "Uploading %s to s3://%s/%s (%s, %d bytes)",
            job.source_path,
            job.bucket,
            job.destination_key,
            content_type,
            len(body),
        )
        try:
            self.client.put_object(
                ACL=self.acl,
                Bucket=job.bucket,
                Key=job.destination_key,
                Body=body,
                ContentType=content_type,
                ServerSideEncryption=self.server_side_encryption,
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(f"failed to upload file, {exc}") from exc
        return decode_location(object_location(job.bucket, job.destination_key))


def upload_all(jobs: Iterable[UploadJob], uploader: S3Uploader) -> UploadResult:
    """Upload ``jobs`` in order and return their URLs keyed by role.

    Raises ``BatchUploadError`` on the first failure, chained to the original
    exception and carrying the URLs collected before it. Nothing is retried or
    cleaned up. Each role may appear only once; a repeated role raises
    ``ValueError`` before anything is uploaded.
    """
    jobs = list(jobs)
    seen: set[AssetRole] = set()
    for job in jobs:
        if job.role in seen:
            raise ValueError(f"duplicate upload role {job.role.value!r}")
        seen.add(job.role)

    uploaded: UploadResult = {}
    for job in jobs:
        try:
            uploaded[job.role] = uploader.upload(job)
        except (OSError, UploadError, LocationDecodeError) as exc:
            LOGGER.error("Upload of %s failed: %s", job.source_path, exc)
            raise BatchUploadError(job, dict(uploaded), exc) from exc
    LOGGER.info("Uploaded %d files", len(uploaded))
    return uploaded


def upload_assets(
    artifact: ArtifactMetadata,
    bucket: str,
    dest_base_dir: str,
    *,
    uploader: S3Uploader,
    generator: AssetGenerator,
) -> tuple[UploadPlan, UploadResult]:
    """Generate, plan and upload every file of a build.

    Asset generation failures surface before anything is uploaded.
    """
    plan = plan_uploads(bucket, dest_base_dir, artifact, generator)
    return plan, upload_all(plan.jobs, uploader)


def format_result(result: Mapping[AssetRole, str]) -> list[str]:
    return [f"{role.value}: {url}" for role, url in result.items()]


__all__ = [
    "BatchUploadError",
    "LocationDecodeError",
    "S3Uploader",
    "UploadError",
    "UploadResult",
    "decode_location",
    "format_result",
    "object_location",
    "upload_all",
    "upload_assets",
]
