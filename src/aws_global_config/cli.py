import argparse
import json
import logging
import os
import sys
from collections.abc import Sequence

import click

from aws_global_config.exceptions import AwsConfigurationError
from aws_global_config.service import AwsGlobalConfiguration
from aws_global_config.validation import FormValidation, Kind

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level = (os.getenv("LOG_LEVEL") or "").strip().upper() or "WARNING"
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _error_response(message: str) -> str:
    return json.dumps({"kind": Kind.ERROR.value, "message": message})


def _echo_validation(result: FormValidation) -> int:
    color = {Kind.OK: "green", Kind.WARNING: "yellow", Kind.ERROR: "red"}[result.kind]
    click.secho(result.kind.value, fg=color, bold=True, nl=False)
    click.echo(f" {result.message}" if result.message else "")
    return 0 if result.is_ok else 1


def _cmd_regions(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    for label, region_id in config.fill_region_items():
        click.echo(f"{region_id or '-':<20} {label}")
    return 0


def _cmd_check_region(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    return _echo_validation(config.check_region(args.region))


def _cmd_show(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    snapshot = config.state.get()
    record = snapshot.to_record()
    record["sessionDuration"] = config.state.session_duration
    click.echo(json.dumps(record, indent=2, sort_keys=True))
    return 0


def _cmd_set_region(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    config.state.set_region(args.region)
    return _cmd_show(config, args)


def _cmd_set_credentials(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    config.state.set_credentials_id(args.credentials_id)
    return _cmd_show(config, args)


def _cmd_set_endpoint(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    config.state.set_endpoint(args.service_endpoint, args.signing_region)
    return _cmd_show(config, args)


def _cmd_test_endpoint(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    return _echo_validation(
        config.test_endpoint(args.service_endpoint, args.signing_region)
    )


def _cmd_credentials(config: AwsGlobalConfiguration, args: argparse.Namespace) -> int:
    credential = config.session_credentials(args.region)
    click.echo(json.dumps(credential.to_dict(), indent=2))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aws-global-config",
        description="Administer the shared AWS configuration and resolve session credentials",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("regions", help="List selectable regions").set_defaults(
        handler=_cmd_regions
    )

    check = commands.add_parser("check-region", help="Validate a region id")
    check.add_argument("region")
    check.set_defaults(handler=_cmd_check_region)

    commands.add_parser("show", help="Print the stored configuration").set_defaults(
        handler=_cmd_show
    )

    set_region = commands.add_parser("set-region", help="Store the region (blank for Auto)")
    set_region.add_argument("region", nargs="?", default="")
    set_region.set_defaults(handler=_cmd_set_region)

    set_credentials = commands.add_parser(
        "set-credentials", help="Store the credentials id (blank for ambient credentials)"
    )
    set_credentials.add_argument("credentials_id", nargs="?", default="")
    set_credentials.set_defaults(handler=_cmd_set_credentials)

    set_endpoint = commands.add_parser(
        "set-endpoint", help="Store the service endpoint override (blank to disable)"
    )
    set_endpoint.add_argument("service_endpoint", nargs="?", default="")
    set_endpoint.add_argument("--signing-region", default="")
    set_endpoint.set_defaults(handler=_cmd_set_endpoint)

    test_endpoint = commands.add_parser(
        "test-endpoint", help="Probe a service endpoint, e.g. http://localhost:4584"
    )
    test_endpoint.add_argument("service_endpoint")
    test_endpoint.add_argument("--signing-region", default="")
    test_endpoint.set_defaults(handler=_cmd_test_endpoint)

    credentials = commands.add_parser(
        "credentials", help="Resolve and print a session credential as JSON"
    )
    credentials.add_argument("--region", default=None)
    credentials.set_defaults(handler=_cmd_credentials)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    _configure_logging()
    args = _build_parser().parse_args(argv)

    try:
        config = AwsGlobalConfiguration.from_environment()
        status = args.handler(config, args)
    except AwsConfigurationError as exc:
        click.echo(_error_response(str(exc)), err=True)
        sys.exit(2)
    except (OSError, ValueError) as exc:
        logger.debug("Failed to read configuration", exc_info=exc)
        click.echo(_error_response(f"Unable to read configuration: {exc}"), err=True)
        sys.exit(2)

    sys.exit(status)


if __name__ == "__main__":
    main()
