"""Per-Bundle lookup of entry identities to resource types.

Built from the original (not yet rewritten) entries so that a reference such
as "urn:uuid:..." can be rewritten with the type of the entry it points to.
Holds only resource types, never pseudonyms, and lives for one request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from fhirshield.pseudonym.extractor import extract_id_part


@dataclass
class DocumentIndex:
    """Maps identity strings found in a Bundle to resource types."""

    by_identity: dict[str, str] = field(default_factory=dict)
    by_id_part: dict[str, set[str]] = field(default_factory=dict)

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str | None, dict[str, Any] | None]]) -> DocumentIndex:
        """Index (fullUrl, resource) pairs taken from Bundle entries."""
        index = cls()
        for full_url, resource in entries:
            if not isinstance(resource, dict):
                continue
            resource_type = resource.get("resourceType")
            if not isinstance(resource_type, str) or not resource_type:
                continue
            if full_url:
                index.add(full_url, resource_type)
            resource_id = resource.get("id")
            if isinstance(resource_id, str) and resource_id:
                index.add(f"{resource_type}/{extract_id_part(resource_id)}", resource_type)
        return index

    def add(self, identity: str, resource_type: str) -> None:
        self.by_identity[identity] = resource_type
        self.by_id_part.setdefault(extract_id_part(identity), set()).add(resource_type)

    def resource_type_of(self, reference: str) -> str | None:
        """Resolve the type of the entry a reference points to.

        Exact identity matches win. A bare id resolves only when every entry
        carrying that id has the same type.
        """
        if reference in self.by_identity:
            return self.by_identity[reference]
        candidates = self.by_id_part.get(extract_id_part(reference), set())
        if len(candidates) == 1:
            return next(iter(candidates))
        return None
