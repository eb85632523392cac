"""Persisted AWS configuration with validated, serialized mutation."""

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from aws_global_config import regions
from aws_global_config.endpoint import EndpointOverride

logger = logging.getLogger(__name__)

DEFAULT_SESSION_DURATION = 3600

SESSION_DURATION_ENV = "AWS_GLOBAL_CONFIG_SESSION_DURATION"


def _session_duration_from_environment() -> int:
    raw = (os.getenv(SESSION_DURATION_ENV) or "").strip()
    if not raw:
        return DEFAULT_SESSION_DURATION
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "Ignoring %s=%r, using %ss", SESSION_DURATION_ENV, raw, DEFAULT_SESSION_DURATION
        )
        return DEFAULT_SESSION_DURATION


# Fixed for the lifetime of the process, like a JVM system property.
SESSION_DURATION = _session_duration_from_environment()

_RECORD_KEYS = {
    "region": "region",
    "credentials_id": "credentialsId",
    "service_endpoint": "serviceEndpoint",
    "signing_region": "signingRegion",
}


def _fix_empty(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class ConfigurationSnapshot:
    region: str | None = None
    credentials_id: str | None = None
    service_endpoint: str | None = None
    signing_region: str | None = None

    @property
    def endpoint(self) -> EndpointOverride:
        return EndpointOverride(self.service_endpoint, self.signing_region)

    def to_record(self) -> dict[str, str]:
        """Serialize, omitting absent fields."""
        return {
            key: getattr(self, attr)
            for attr, key in _RECORD_KEYS.items()
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ConfigurationSnapshot":
        return cls(**{attr: _fix_empty(record.get(key)) for attr, key in _RECORD_KEYS.items()})


class ConfigurationFile:
    """JSON file holding one configuration record."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None
        with self.path.open(encoding="utf-8") as handle:
            record = json.load(handle)
        if not isinstance(record, dict):
            raise ValueError(f"{self.path} does not hold a configuration object")
        return record

    def save(self, record: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(record, handle, indent=2, sort_keys=True)
                handle.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class AwsConfigurationState:
    """
    The administered AWS configuration.

    Mutators validate, then persist, under a single lock so a rejected value
    never reaches disk. :meth:`get` returns an immutable snapshot without
    taking the lock; it reflects the last committed write.
    """

    def __init__(
        self,
        storage: ConfigurationFile | None = None,
        session_duration: int = SESSION_DURATION,
    ) -> None:
        self._storage = storage
        self._session_duration = session_duration
        self._lock = threading.Lock()
        self._snapshot = ConfigurationSnapshot()

    @property
    def session_duration(self) -> int:
        return self._session_duration

    def get(self) -> ConfigurationSnapshot:
        return self._snapshot

    def load(self) -> ConfigurationSnapshot:
        """Replace the in-memory state with the persisted record, if any."""
        with self._lock:
            record = self._storage.load() if self._storage else None
            snapshot = ConfigurationSnapshot.from_record(record or {})
            regions.validate(snapshot.region).raise_for_error()
            regions.validate(snapshot.signing_region).raise_for_error()
            self._snapshot = snapshot
        logger.debug("Loaded AWS configuration: %s", snapshot)
        return snapshot

    def save(self) -> None:
        with self._lock:
            self._persist(self._snapshot)

    def _persist(self, snapshot: ConfigurationSnapshot) -> None:
        if self._storage is not None:
            self._storage.save(snapshot.to_record())

    def _commit(self, **changes: str | None) -> ConfigurationSnapshot:
        # Caller holds the lock.
        snapshot = replace(self._snapshot, **changes)
        self._persist(snapshot)
        self._snapshot = snapshot
        return snapshot

    def set_region(self, region: str | None) -> ConfigurationSnapshot:
        regions.validate(region).raise_for_error()
        with self._lock:
            return self._commit(region=_fix_empty(region))

    def set_credentials_id(self, credentials_id: str | None) -> ConfigurationSnapshot:
        with self._lock:
            return self._commit(credentials_id=_fix_empty(credentials_id))

    def set_service_endpoint(self, service_endpoint: str | None) -> ConfigurationSnapshot:
        with self._lock:
            return self._commit(service_endpoint=_fix_empty(service_endpoint))

    def set_signing_region(self, signing_region: str | None) -> ConfigurationSnapshot:
        regions.validate(signing_region).raise_for_error()
        with self._lock:
            return self._commit(signing_region=_fix_empty(signing_region))

    def set_endpoint(
        self, service_endpoint: str | None, signing_region: str | None
    ) -> ConfigurationSnapshot:
        """Replace the whole endpoint override in a single write."""
        regions.validate(signing_region).raise_for_error()
        with self._lock:
            return self._commit(
                service_endpoint=_fix_empty(service_endpoint),
                signing_region=_fix_empty(signing_region),
            )
