"""Tests for aws_global_config.cli module."""

import json
import os
from unittest.mock import patch

import pytest

from aws_global_config import cli
from aws_global_config.config import SESSION_DURATION


@pytest.fixture
def env(tmp_path):
    credentials_path = tmp_path / "credentials.json"
    credentials_path.write_text(
        json.dumps(
            {
                "session": {
                    "accessKeyId": "ASIAFILE",
                    "secretAccessKey": "file-secret",
                    "sessionToken": "file-token",
                }
            }
        ),
        encoding="utf-8",
    )
    values = {
        "AWS_GLOBAL_CONFIG_FILE": str(tmp_path / "config.json"),
        "AWS_GLOBAL_CONFIG_CREDENTIALS_FILE": str(credentials_path),
    }
    with patch.dict(os.environ, values, clear=True):
        yield tmp_path


def _run(*argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(list(argv))
    return excinfo.value.code


class TestCli:
    def test_check_region_ok(self, env, capsys):
        assert _run("check-region", "us-east-1") == 0
        assert capsys.readouterr().out.startswith("OK")

    def test_check_region_error(self, env, capsys):
        assert _run("check-region", "no-valid") == 1
        assert "Region is not valid" in capsys.readouterr().out

    def test_set_region_and_show(self, env, capsys):
        assert _run("set-region", "us-east-1") == 0
        capsys.readouterr()

        assert _run("show") == 0
        shown = json.loads(capsys.readouterr().out)
        assert shown["region"] == "us-east-1"
        assert shown["sessionDuration"] == SESSION_DURATION

    def test_set_invalid_region(self, env, capsys):
        assert _run("set-region", "not-a-region") == 2

        error = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert error == {"kind": "ERROR", "message": "Region is not valid"}
        assert not (env / "config.json").exists()

    def test_credentials_from_store(self, env, capsys):
        assert _run("set-credentials", "session") == 0
        capsys.readouterr()

        assert _run("credentials") == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed == {
            "AccessKeyId": "ASIAFILE",
            "SecretAccessKey": "file-secret",
            "SessionToken": "file-token",
        }

    def test_credentials_with_endpoint_override(self, env, capsys):
        assert _run("set-endpoint", "http://localhost:4566", "--signing-region", "us-east-1") == 0
        capsys.readouterr()

        assert _run("credentials") == 0
        assert json.loads(capsys.readouterr().out)["AccessKeyId"] == "test"

    def test_set_endpoint_invalid_signing_region(self, env, capsys):
        assert _run("set-endpoint", "http://localhost:4566", "--signing-region", "nowhere") == 2
        assert not (env / "config.json").exists()

    def test_regions(self, env, capsys):
        assert _run("regions") == 0
        assert "us-east-1" in capsys.readouterr().out
