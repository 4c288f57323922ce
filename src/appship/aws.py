"""AWS session and client helpers shared across the appship package."""
from __future__ import annotations

from typing import Any

import boto3


def create_session(*, profile: str | None = None, region: str | None = None) -> boto3.session.Session:
    """Return an explicit ``boto3`` session.

    Credentials are resolved once here (profile, environment or instance role)
    and the resulting session is handed to the uploader, so nothing downstream
    reads ambient process state.
    """

    return boto3.session.Session(profile_name=profile, region_name=region)


def create_s3_client(session: boto3.session.Session | None = None) -> Any:
    """Build an S3 client from ``session`` (a default session when omitted)."""
    session = session or create_session()
    return session.client("s3")


__all__ = ["create_s3_client", "create_session"]
