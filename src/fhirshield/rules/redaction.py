"""Directly identifying elements removed outright during de-identification."""

from __future__ import annotations

from typing import Any, Final, Iterable

from fhirshield.common.constants import ResourceType

# Elements cleared per resource type. Types not listed keep all elements.
CLEARED_FIELDS: Final[dict[ResourceType, tuple[str, ...]]] = {
    ResourceType.PATIENT: (
        "identifier",
        "extension",
        "name",
        "telecom",
        "address",
        "photo",
        "contact",
    ),
}


def cleared_fields_for(resource_type: ResourceType) -> tuple[str, ...]:
    """Return the elements cleared for a resource type (possibly empty)."""
    return CLEARED_FIELDS.get(resource_type, ())


def clear_fields(resource: dict[str, Any], fields: Iterable[str]) -> int:
    """Remove the given top-level elements from a resource in place.

    FHIR JSON forbids empty arrays, so a cleared element is deleted rather
    than set to []. Returns the number of elements actually present and removed.
    """
    removed = 0
    for name in fields:
        if resource.pop(name, None) is not None:
            removed += 1
    return removed
