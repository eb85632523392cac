"""Token exchange against the AWS Security Token Service."""

import logging
from collections.abc import Callable
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from aws_global_config.credentials import Credential, SessionCredential
from aws_global_config.exceptions import TokenExchangeFailed

logger = logging.getLogger(__name__)


class MissingCredentialsError(Exception):
    """The token service answered without a credentials block."""


class SessionTokenExchange:
    """
    Convert a long-lived credential into a session credential.

    Each call issues exactly one ``GetSessionToken`` request; nothing is cached
    and nothing is retried.
    """

    def __init__(self, client_factory: Callable[..., Any] | None = None) -> None:
        self._client_factory = client_factory or boto3.client

    def _client(self, credential: Credential, region: str | None) -> Any:
        kwargs = credential.boto3_kwargs()
        if region:
            kwargs["region_name"] = region
        return self._client_factory("sts", **kwargs)

    def exchange(
        self, credential: Credential, region: str | None, duration_seconds: int
    ) -> SessionCredential:
        """
        Request a session token for ``credential``.

        Args:
            credential: Long-lived key pair to sign the request with.
            region: Selects the regional STS endpoint; the default endpoint is
                used when omitted.
            duration_seconds: Requested lifetime of the session.

        Raises:
            TokenExchangeFailed: On any transport or service error.
        """
        logger.debug(
            "Requesting session token for %s (region=%s, duration=%ss)",
            credential.access_key_id,
            region or "default",
            duration_seconds,
        )
        try:
            sts = self._client(credential, region)
            response = sts.get_session_token(DurationSeconds=duration_seconds)
        except (BotoCoreError, ClientError) as exc:
            raise TokenExchangeFailed(exc) from exc

        credentials = response.get("Credentials")
        if not credentials:
            raise TokenExchangeFailed(
                MissingCredentialsError("GetSessionToken response missing credentials")
            )

        return SessionCredential(
            access_key_id=credentials.get("AccessKeyId"),
            secret_access_key=credentials.get("SecretAccessKey"),
            session_token=credentials.get("SessionToken"),
            expiration=credentials.get("Expiration"),
        )
