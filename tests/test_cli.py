import json

import pytest

from appship import cli


def _args(artifact, *extra):
    return [
        "--file",
        artifact.source_file_path,
        "--version",
        "1.2.0",
        "--build",
        "45",
        "--assets-dir",
        artifact.assets_dir,
        *extra,
    ]


def test_dry_run_does_not_create_clients(android_artifact, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("no AWS access during a dry run")

    monkeypatch.setattr(cli, "create_session", fail)
    assert cli.main(_args(android_artifact, "--bucket", "releases", "--dry-run")) == 0


def test_missing_bucket_is_a_usage_error(android_artifact):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(_args(android_artifact))
    assert excinfo.value.code == 2


def test_upload_uses_config_file(ios_artifact, tmp_path, monkeypatch, make_client):
    client = make_client()
    sessions = []
    monkeypatch.setattr(cli, "create_session", lambda **kwargs: sessions.append(kwargs) or "session")
    monkeypatch.setattr(cli, "create_s3_client", lambda session: client)
    config = tmp_path / "appship.json"
    config.write_text(json.dumps({"bucket": "releases", "dest_base_dir": "app", "profile": "ci"}))

    assert cli.main(_args(ios_artifact, "--config", str(config))) == 0
    assert sessions == [{"profile": "ci", "region": None}]
    assert [call["Key"] for call in client.calls] == [
        "app/1.2.0/45/appicon.png",
        "app/1.2.0/45/version.json",
        "app/1.2.0/45/index.html",
        "app/1.2.0/45/build.ipa",
        "app/1.2.0/45/app.plist",
    ]


def test_upload_failure_exit_code(android_artifact, monkeypatch, make_client):
    from botocore.exceptions import ClientError

    error = ClientError({"Error": {"Code": "NoSuchBucket", "Message": "missing"}}, "PutObject")
    monkeypatch.setattr(cli, "create_session", lambda **kwargs: "session")
    monkeypatch.setattr(cli, "create_s3_client", lambda session: make_client(fail_on=2, error=error))
    assert cli.main(_args(android_artifact, "--bucket", "releases")) == 1


def test_missing_assets_exit_code(android_artifact, tmp_path, monkeypatch, make_client):
    monkeypatch.setattr(cli, "create_session", lambda **kwargs: "session")
    monkeypatch.setattr(cli, "create_s3_client", lambda session: make_client())
    args = _args(android_artifact, "--bucket", "releases")
    args[args.index("--assets-dir") + 1] = str(tmp_path / "nowhere")
    assert cli.main(args) == 1


def test_empty_dest_dir_is_a_usage_error(android_artifact):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(_args(android_artifact, "--bucket", "releases", "--dest-dir", "", "--dry-run"))
    assert excinfo.value.code == 2


def test_missing_config_file_is_a_usage_error(android_artifact, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(_args(android_artifact, "--config", str(tmp_path / "absent.json"), "--dry-run"))
    assert excinfo.value.code == 2
