#!/usr/bin/env python3
# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "boto3",
#     "click",
# ]
# ///
"""Point the configuration at a local emulator and exercise a few calls."""

from __future__ import annotations

import argparse
import sys
import tempfile
from pathlib import Path

import click
from botocore.exceptions import BotoCoreError, ClientError

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from aws_global_config.config import AwsConfigurationState, ConfigurationFile
from aws_global_config.credentials import InMemoryCredentialStore
from aws_global_config.service import AwsGlobalConfiguration


def _run_smoketest(service_endpoint: str, signing_region: str, bucket: str) -> int:
    with tempfile.TemporaryDirectory() as workdir:
        state = AwsConfigurationState(ConfigurationFile(Path(workdir) / "config.json"))
        state.load()
        config = AwsGlobalConfiguration(state, InMemoryCredentialStore())

        click.secho("Endpoint", fg="cyan", bold=True)
        result = config.test_endpoint(service_endpoint, signing_region)
        click.echo(f"  {result.kind.value}: {result.message}")
        if not result.is_ok:
            return 1

        state.set_endpoint(service_endpoint, signing_region)

        click.secho("\nCredentials", fg="cyan", bold=True)
        credential = config.session_credentials()
        click.echo(f"  • access key {credential.access_key_id}")

        click.secho("\nS3", fg="cyan", bold=True)
        s3 = config.clients.client("s3")
        try:
            s3.create_bucket(Bucket=bucket)
            names = [b["Name"] for b in s3.list_buckets().get("Buckets", [])]
        except (BotoCoreError, ClientError) as exc:
            click.secho(f"  {exc}", fg="red")
            return 1
        for name in names:
            click.echo(f"  • {name}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Exercise the endpoint override against a local AWS emulator"
    )
    parser.add_argument(
        "service_endpoint",
        nargs="?",
        default="http://localhost:4566",
        help="Emulator endpoint (default: http://localhost:4566)",
    )
    parser.add_argument("--signing-region", default="us-east-1")
    parser.add_argument("--bucket", default="aws-global-config-smoketest")

    args = parser.parse_args()
    sys.exit(_run_smoketest(args.service_endpoint, args.signing_region, args.bucket))


if __name__ == "__main__":
    main()
