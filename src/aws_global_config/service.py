"""Wiring of the configuration, resolver and UI-facing checks."""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from aws_global_config import endpoint as endpoint_module
from aws_global_config import regions
from aws_global_config.clients import ClientFactory
from aws_global_config.config import AwsConfigurationState, ConfigurationFile
from aws_global_config.credentials import (
    AmbientProvider,
    CredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
    SessionCredential,
)
from aws_global_config.resolver import CredentialResolver
from aws_global_config.sts import SessionTokenExchange
from aws_global_config.validation import FormValidation

logger = logging.getLogger(__name__)

AMBIENT_CREDENTIALS_LABEL = "IAM instance Profile/user AWS configuration"
DEFAULT_CONFIG_FILE = "~/.aws-global-config/config.json"


class AwsGlobalConfiguration:
    """
    Owns the configuration lifecycle and exposes the operations the
    administrative UI calls.
    """

    def __init__(
        self,
        state: AwsConfigurationState,
        store: CredentialStore,
        exchange: SessionTokenExchange | None = None,
        ambient: AmbientProvider | None = None,
        probe_client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self.state = state
        self.store = store
        self.resolver = CredentialResolver(
            store,
            exchange=exchange,
            ambient=ambient,
            session_duration=state.session_duration,
        )
        self.clients = ClientFactory(state, self.resolver)
        self._probe_client_factory = probe_client_factory

    @classmethod
    def from_environment(cls) -> "AwsGlobalConfiguration":
        config_path = (os.getenv("AWS_GLOBAL_CONFIG_FILE") or "").strip()
        credentials_path = (os.getenv("AWS_GLOBAL_CONFIG_CREDENTIALS_FILE") or "").strip()

        state = AwsConfigurationState(
            ConfigurationFile(Path(config_path or DEFAULT_CONFIG_FILE).expanduser())
        )
        state.load()

        store: CredentialStore
        if credentials_path:
            store = FileCredentialStore(Path(credentials_path).expanduser())
        else:
            store = InMemoryCredentialStore()
        return cls(state, store)

    def session_credentials(self, region: str | None = None) -> SessionCredential:
        """Resolve credentials for the current configuration."""
        snapshot = self.state.get()
        if region is None:
            return self.resolver.resolve(snapshot)
        return self.resolver.session_credentials(
            region, snapshot.credentials_id, snapshot.endpoint
        )

    def check_region(self, region: str | None) -> FormValidation:
        return regions.validate(region)

    def fill_region_items(self) -> list[tuple[str, str]]:
        return regions.list_regions()

    def fill_credentials_id_items(self) -> list[tuple[str, str]]:
        items = [(AMBIENT_CREDENTIALS_LABEL, "")]
        items.extend(
            (display_name, credentials_id)
            for credentials_id, display_name in self.store.list()
        )
        return items

    def test_endpoint(
        self, service_endpoint: str, signing_region: str | None
    ) -> FormValidation:
        return endpoint_module.test_connectivity(
            service_endpoint,
            signing_region,
            client_factory=self._probe_client_factory,
            ambient=self.resolver.ambient,
        )
