"""Select a credential source and produce a session credential."""

import logging

from aws_global_config.config import ConfigurationSnapshot, SESSION_DURATION
from aws_global_config.credentials import (
    AmbientProvider,
    Boto3AmbientProvider,
    CredentialStore,
    SessionCredential,
)
from aws_global_config.endpoint import FIXED_TEST_CREDENTIAL, EndpointOverride
from aws_global_config.exceptions import (
    CredentialsUnavailable,
    NoValidSessionCredential,
)
from aws_global_config.sts import SessionTokenExchange

logger = logging.getLogger(__name__)


class CredentialResolver:
    """
    Resolve session credentials from, in order of precedence:

    1. the endpoint override, which always yields a fixed test credential;
    2. the configured credential, exchanged for a session token unless it
       already is one;
    3. the ambient credential chain, which must already vend session
       credentials. Ambient credentials are never exchanged.

    An unknown credentials id is treated as "not configured" and falls through
    to the ambient chain.
    """

    def __init__(
        self,
        store: CredentialStore,
        exchange: SessionTokenExchange | None = None,
        ambient: AmbientProvider | None = None,
        endpoint: EndpointOverride | None = None,
        session_duration: int = SESSION_DURATION,
    ) -> None:
        self.store = store
        self.exchange = exchange or SessionTokenExchange()
        self.ambient = ambient or Boto3AmbientProvider()
        self.endpoint = endpoint or EndpointOverride()
        self.session_duration = session_duration

    def session_credentials(
        self,
        region: str | None,
        credentials_id: str | None,
        endpoint: EndpointOverride | None = None,
    ) -> SessionCredential:
        endpoint = endpoint if endpoint is not None else self.endpoint
        if endpoint.is_active():
            logger.debug("Endpoint override active, using the fixed test credential")
            return FIXED_TEST_CREDENTIAL

        base = None
        if credentials_id and credentials_id.strip():
            base = self.store.lookup(credentials_id)
            if base is None:
                logger.warning(
                    "Credentials %s not found, falling back to ambient credentials",
                    credentials_id,
                )

        if base is not None:
            if base.is_session:
                logger.debug("Credentials %s already hold a session", credentials_id)
                return SessionCredential.from_credential(base)
            return self.exchange.exchange(base, region, self.session_duration)

        return self._ambient_session_credentials()

    def _ambient_session_credentials(self) -> SessionCredential:
        credential = self.ambient.resolve()
        if credential is None:
            raise CredentialsUnavailable("Unable to get credentials from environment")
        if not credential.is_session:
            raise NoValidSessionCredential("No valid session credentials")
        logger.debug("Using ambient session credentials")
        return SessionCredential.from_credential(credential)

    def resolve(self, snapshot: ConfigurationSnapshot) -> SessionCredential:
        """Resolve for a configuration snapshot, honouring its endpoint override."""
        return self.session_credentials(
            snapshot.region, snapshot.credentials_id, snapshot.endpoint
        )
