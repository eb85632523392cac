"""Region catalog backed by botocore's bundled endpoint data."""

from functools import lru_cache

import botocore.session

from aws_global_config.validation import FormValidation

AUTO_LABEL = "Auto"
INVALID_REGION_MESSAGE = "Region is not valid"


@lru_cache(maxsize=1)
def _catalog() -> tuple[tuple[str, str], ...]:
    endpoints = botocore.session.get_session().get_data("endpoints")
    entries: list[tuple[str, str]] = []
    seen: set[str] = set()
    for partition in endpoints.get("partitions", []):
        for region_id, metadata in partition.get("regions", {}).items():
            if region_id in seen:
                continue
            seen.add(region_id)
            label = (metadata or {}).get("description") or region_id
            entries.append((label, region_id))
    return tuple(entries)


def list_regions() -> list[tuple[str, str]]:
    """
    Return ``(label, region_id)`` pairs for a region selector.

    The first entry is always ``("Auto", "")``, meaning the region is left for
    the SDK to resolve.
    """
    return [(AUTO_LABEL, ""), *_catalog()]


def region_ids() -> frozenset[str]:
    return frozenset(region_id for _, region_id in _catalog())


def is_valid_region(region: str | None) -> bool:
    return region in region_ids()


def validate(region: str | None) -> FormValidation:
    """Blank is always OK; anything else must be an exact catalog match."""
    if region is None or not region.strip():
        return FormValidation.ok()
    if not is_valid_region(region):
        return FormValidation.error(INVALID_REGION_MESSAGE)
    return FormValidation.ok()
