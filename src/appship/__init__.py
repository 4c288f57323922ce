"""Upload mobile builds and their install assets to S3."""

from .artifact import ArtifactMetadata, Platform, PrebuiltAssets, PublicLinks
from .config import UploadSettings
from .planner import AssetRole, UploadJob, UploadPlan, plan_uploads
from .s3_uploader import (
    BatchUploadError,
    S3Uploader,
    UploadError,
    upload_all,
    upload_assets,
)

__all__ = [
    "ArtifactMetadata",
    "AssetRole",
    "BatchUploadError",
    "Platform",
    "PrebuiltAssets",
    "PublicLinks",
    "S3Uploader",
    "UploadError",
    "UploadJob",
    "UploadPlan",
    "UploadSettings",
    "plan_uploads",
    "upload_all",
    "upload_assets",
]
