"""Credential types and the stores they are looked up from."""

import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from aws_global_config.exceptions import CredentialsUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    """A long-lived key pair, or a key pair already carrying a session token."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None

    @property
    def is_session(self) -> bool:
        return bool(self.session_token)

    def boto3_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
        }
        if self.session_token:
            kwargs["aws_session_token"] = self.session_token
        return kwargs

    def __repr__(self) -> str:
        return f"{type(self).__name__}(access_key_id={self.access_key_id!r})"


@dataclass(frozen=True, repr=False)
class SessionCredential(Credential):
    """A short-lived credential vended by the token service."""

    session_token: str = ""
    expiration: datetime | None = None

    @classmethod
    def from_credential(cls, credential: Credential) -> "SessionCredential":
        if isinstance(credential, SessionCredential):
            return credential
        return cls(
            access_key_id=credential.access_key_id,
            secret_access_key=credential.secret_access_key,
            session_token=credential.session_token or "",
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "AccessKeyId": self.access_key_id,
            "SecretAccessKey": self.secret_access_key,
            "SessionToken": self.session_token,
        }
        if self.expiration is not None:
            data["Expiration"] = self.expiration.isoformat()
        return data


class CredentialStore(Protocol):
    def lookup(self, credentials_id: str) -> Credential | None: ...

    def list(self) -> list[tuple[str, str]]: ...


class AmbientProvider(Protocol):
    def resolve(self) -> Credential | None: ...

    def region(self) -> str | None: ...


class InMemoryCredentialStore:
    """Credential store held in process memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[str, Credential]] = {}

    def add(
        self, credentials_id: str, credential: Credential, description: str = ""
    ) -> None:
        with self._lock:
            self._entries[credentials_id] = (description, credential)

    def remove(self, credentials_id: str) -> None:
        with self._lock:
            self._entries.pop(credentials_id, None)

    def lookup(self, credentials_id: str) -> Credential | None:
        entry = self._entries.get(credentials_id)
        return entry[1] if entry else None

    def list(self) -> list[tuple[str, str]]:
        return [
            (credentials_id, description or credentials_id)
            for credentials_id, (description, _) in sorted(self._entries.items())
        ]


class FileCredentialStore:
    """
    Read-only credential store backed by a JSON document.

    The file maps credential ids to objects with ``accessKeyId``,
    ``secretAccessKey`` and optional ``sessionToken`` and ``description``
    keys. Protecting the file at rest is left to whoever provisions it.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        return data if isinstance(data, dict) else {}

    def lookup(self, credentials_id: str) -> Credential | None:
        entry = self._read().get(credentials_id)
        if not isinstance(entry, dict):
            return None
        access_key_id = entry.get("accessKeyId")
        secret_access_key = entry.get("secretAccessKey")
        if not access_key_id or not secret_access_key:
            logger.warning("Credential %s is missing its key pair", credentials_id)
            return None
        return Credential(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=entry.get("sessionToken") or None,
        )

    def list(self) -> list[tuple[str, str]]:
        return [
            (credentials_id, (entry or {}).get("description") or credentials_id)
            for credentials_id, entry in sorted(self._read().items())
        ]


class Boto3AmbientProvider:
    """Ambient credentials from the boto3 default chain (env, profile, IMDS)."""

    def resolve(self) -> Credential | None:
        try:
            credentials = boto3.session.Session().get_credentials()
            if credentials is None:
                return None
            # Deferred and refreshable providers fetch here.
            frozen = credentials.get_frozen_credentials()
        except (BotoCoreError, ClientError) as exc:
            raise CredentialsUnavailable(
                f"Unable to get credentials from environment: {exc}"
            ) from exc

        return Credential(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token or None,
        )

    def region(self) -> str | None:
        return boto3.session.Session().region_name
