"""Command line interface for uploading a mobile build to S3."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from rich.console import Console

from .artifact import ArtifactMetadata, Platform, PrebuiltAssets
from .aws import create_s3_client, create_session
from .config import UploadSettings, default_settings, load_settings
from .planner import build_jobs, compute_links
from .s3_uploader import BatchUploadError, S3Uploader, format_result, upload_assets

console = Console()


def _parse_platform(value: str) -> Platform:
    try:
        return Platform(value.lower())
    except ValueError as exc:
        raise argparse.ArgumentTypeError("platform must be 'ios' or 'android'") from exc


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Upload an .ipa or .apk build and its install assets to S3.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--file", required=True, help="Path to the .ipa or .apk to upload.")
    parser.add_argument("--version", required=True, help="Application version, e.g. 1.2.0.")
    parser.add_argument("--build", required=True, help="Build identifier, e.g. 45.")
    parser.add_argument(
        "--platform",
        type=_parse_platform,
        default=None,
        help="ios or android (inferred from the file extension when omitted).",
    )
    parser.add_argument("--bucket", default=None, help="Destination S3 bucket.")
    parser.add_argument("--dest-dir", default=None, help="Base key prefix inside the bucket.")
    parser.add_argument(
        "--assets-dir",
        default=None,
        help="Directory holding the generated icon, version.json and index.html.",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON settings file.")
    parser.add_argument("--region", default=None, help="AWS region for the S3 client.")
    parser.add_argument("--profile", default=None, help="Named AWS profile.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned uploads without touching S3.",
    )
    return parser


def _resolve_settings(args: argparse.Namespace) -> UploadSettings:
    settings = load_settings(args.config) if args.config else default_settings()
    return settings.with_overrides(
        bucket=args.bucket,
        dest_base_dir=args.dest_dir,
        region=args.region,
        profile=args.profile,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point; returns a process exit code."""
    logging.basicConfig(level=logging.INFO)
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _resolve_settings(args)
        platform = args.platform or Platform.from_file(args.file)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))
    if not settings.bucket:
        parser.error("a bucket is required (--bucket or the settings file)")

    artifact = ArtifactMetadata.for_platform(
        version=args.version,
        build_id=args.build,
        source_file_path=args.file,
        platform=platform,
        assets_dir=args.assets_dir or settings.assets_dir(platform),
    )

    if args.dry_run:
        links = compute_links(settings.bucket, settings.dest_base_dir, artifact)
        for job in build_jobs(settings.bucket, settings.dest_base_dir, artifact):
            console.log(f"{job.source_path} -> s3://{job.bucket}/{job.destination_key}")
        console.log(f"Download URL: {links.download_url}")
        if links.manifest_url:
            console.log(f"Manifest URL: {links.manifest_url}")
        console.log("Dry-run enabled; skipping upload.")
        return 0

    session = create_session(profile=settings.profile, region=settings.region)
    uploader = S3Uploader(
        create_s3_client(session),
        acl=settings.acl,
        server_side_encryption=settings.server_side_encryption,
    )
    console.log(f"Uploading {artifact.platform.value} build {artifact.version} ({artifact.build_id})...")
    try:
        plan, result = upload_assets(
            artifact,
            settings.bucket,
            settings.dest_base_dir,
            uploader=uploader,
            generator=PrebuiltAssets(),
        )
    except FileNotFoundError as exc:
        console.log(f"[red]{exc}[/red]")
        return 1
    except BatchUploadError as exc:
        console.log(f"[red]{exc}[/red]")
        for line in format_result(exc.uploaded):
            console.log(f"  already uploaded {line}")
        return 1

    for line in format_result(result):
        console.log(line)
    console.log(f"Download URL: {plan.download_url}")
    if plan.manifest_url:
        console.log(f"Manifest URL: {plan.manifest_url}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
