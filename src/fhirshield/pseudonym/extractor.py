"""Logical id extraction from FHIR identity and reference strings."""

from __future__ import annotations

import re
from typing import Final

from fhirshield.common.constants import REFERENCE_DELIMITERS

_DELIMITER_PATTERN: Final[re.Pattern[str]] = re.compile(f"[{re.escape(REFERENCE_DELIMITERS)}]")


def split_reference(value: str) -> list[str]:
    """Split an identity string on every ':' and '/' delimiter.

    Trailing empty parts are dropped, so "urn:uuid:" splits to ["urn", "uuid"]
    and "Patient/" to ["Patient"].
    """
    parts = _DELIMITER_PATTERN.split(value)
    while parts and not parts[-1]:
        parts.pop()
    return parts


def extract_id_part(value: str) -> str:
    """Return the logical id carried by an identity or reference string.

    Accepts the three shapes found in Bundles:
    - "urn:uuid:<id>" (fullUrl of a transaction entry)
    - "<ResourceType>/<id>" (relative or absolute literal reference)
    - "<id>" (bare logical id)

    Ids that themselves contain ':' or '/' are not supported.

    Args:
        value: fullUrl, resource id, or reference string.

    Returns:
        The last part once trailing empty parts are dropped, or the value
        unchanged when it splits into fewer than two parts.
    """
    parts = split_reference(value)
    if len(parts) > 1:
        return parts[-1]
    return value


def extract_type_part(value: str) -> str:
    """Return the segment preceding the id, e.g. 'Patient' for 'Patient/123'.

    Empty when the value has fewer than two parts.
    """
    parts = split_reference(value)
    if len(parts) > 1:
        return parts[-2]
    return ""
