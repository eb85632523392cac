"""boto3 clients signed with resolved session credentials."""

import logging
from collections.abc import Callable
from typing import Any

import boto3
from botocore.config import Config

from aws_global_config.config import AwsConfigurationState
from aws_global_config.resolver import CredentialResolver

logger = logging.getLogger(__name__)


class ClientFactory:
    """Build service clients for the current configuration."""

    def __init__(
        self,
        state: AwsConfigurationState,
        resolver: CredentialResolver,
        client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self.state = state
        self.resolver = resolver
        self._client_factory = client_factory or boto3.client

    def client(self, service_name: str, region: str | None = None, **kwargs: Any) -> Any:
        """
        Create a client for ``service_name``.

        ``region`` overrides the configured region. When an endpoint override
        is active, the override's endpoint and signing region are used instead
        and S3 is switched to path-style addressing.
        """
        snapshot = self.state.get()
        region = region or snapshot.region
        endpoint = snapshot.endpoint

        credential = self.resolver.session_credentials(
            region, snapshot.credentials_id, endpoint
        )
        kwargs.update(credential.boto3_kwargs())

        if endpoint.is_active():
            kwargs.update(endpoint.client_kwargs(self.resolver.ambient))
            if service_name == "s3":
                kwargs["config"] = _merge_config(
                    kwargs.get("config"), Config(s3={"addressing_style": "path"})
                )
        elif region:
            kwargs["region_name"] = region

        logger.debug(
            "Creating %s client (region=%s, endpoint=%s)",
            service_name,
            kwargs.get("region_name"),
            kwargs.get("endpoint_url"),
        )
        return self._client_factory(service_name, **kwargs)


def _merge_config(base: Config | None, extra: Config) -> Config:
    return base.merge(extra) if base is not None else extra
