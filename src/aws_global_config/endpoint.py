"""Service endpoint override for running against a local AWS emulator."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config

from aws_global_config import regions
from aws_global_config.credentials import AmbientProvider, SessionCredential
from aws_global_config.exceptions import TestConnectivityFailed, abbreviate
from aws_global_config.validation import FormValidation

logger = logging.getLogger(__name__)

DEFAULT_SIGNING_REGION = "us-west-2"
SUCCESS_MESSAGE = "success"

# Handed out for every resolution while an override is active.
FIXED_TEST_CREDENTIAL = SessionCredential(
    access_key_id="test", secret_access_key="test", session_token="test"
)

PROBE_CLIENT_CONFIG = Config(
    connect_timeout=5,
    read_timeout=10,
    retries={"max_attempts": 1},
)


class AwsServerError(Exception):
    """The probed endpoint answered with a non-success HTTP status."""


@dataclass(frozen=True)
class EndpointOverride:
    service_endpoint: str | None = None
    signing_region: str | None = None

    def __post_init__(self) -> None:
        regions.validate(self.signing_region).raise_for_error()

    def is_active(self) -> bool:
        return bool(self.service_endpoint)

    def resolve_signing_region(self, ambient: AmbientProvider | None = None) -> str:
        return _signing_region_or_default(self.signing_region, ambient)

    def client_kwargs(self, ambient: AmbientProvider | None = None) -> dict[str, Any]:
        """Keyword arguments that point a boto3 client at the override."""
        if not self.is_active():
            return {}
        return {
            "endpoint_url": self.service_endpoint,
            "region_name": self.resolve_signing_region(ambient),
        }

    def __str__(self) -> str:
        return (
            f"Service Endpoint = {self.service_endpoint}, "
            f"Signing Region = {self.signing_region}"
        )


def _signing_region_or_default(
    signing_region: str | None, ambient: AmbientProvider | None
) -> str:
    if signing_region:
        return signing_region
    current = ambient.region() if ambient is not None else None
    return current or DEFAULT_SIGNING_REGION


def probe(
    service_endpoint: str,
    signing_region: str | None,
    client_factory: Callable[..., Any] | None = None,
    ambient: AmbientProvider | None = None,
) -> int:
    """
    Issue one ``ListSecrets`` call against ``service_endpoint``.

    Returns the HTTP status code of a successful probe.

    Raises:
        TestConnectivityFailed: If the call raises or answers outside 200-399.
    """
    factory = client_factory or boto3.client
    region = _signing_region_or_default(signing_region, ambient)
    logger.debug("Probing %s with signing region %s", service_endpoint, region)
    try:
        client = factory(
            "secretsmanager",
            endpoint_url=service_endpoint,
            region_name=region,
            config=PROBE_CLIENT_CONFIG,
            **FIXED_TEST_CREDENTIAL.boto3_kwargs(),
        )
        response = client.list_secrets()
    except Exception as exc:
        raise TestConnectivityFailed(exc) from exc

    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
    if not 200 <= status <= 399:
        raise TestConnectivityFailed(AwsServerError(f"HTTP {status}"))
    return status


def test_connectivity(
    service_endpoint: str,
    signing_region: str | None,
    client_factory: Callable[..., Any] | None = None,
    ambient: AmbientProvider | None = None,
) -> FormValidation:
    """Probe an endpoint and report the outcome for display."""
    try:
        probe(service_endpoint, signing_region, client_factory, ambient)
    except TestConnectivityFailed as exc:
        return FormValidation.error(abbreviate(str(exc)))
    return FormValidation.ok(SUCCESS_MESSAGE)
