#!/usr/bin/env python3
"""Entry point for uploading a mobile build to S3."""

from appship.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
