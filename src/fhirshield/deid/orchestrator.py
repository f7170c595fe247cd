"""Bundle de-identification: gate, per-entry identity rewrite, dispatch.

Flow for one request:
    gate on request path -> parse Bundle -> index entries ->
    for each entry (in order): rewrite identity, process resource ->
    serialize Bundle

Either every entry is processed and a payload is returned, or an exception
propagates and no payload exists. The parsed tree is owned by the call.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from fhirshield.bundle.codec import BundleDocument, BundleEntry, parse_bundle, serialize_bundle
from fhirshield.common.config import ShieldConfig
from fhirshield.common.constants import BUNDLE_REQUEST_PATHS
from fhirshield.common.schemas import RequestDetails, RequestMutation
from fhirshield.deid.index import DocumentIndex
from fhirshield.deid.processor import ResourceProcessor
from fhirshield.deid.rewriter import ReferenceRewriter
from fhirshield.pseudonym.extractor import extract_id_part
from fhirshield.pseudonym.hasher import Pseudonymizer

logger = logging.getLogger(__name__)


def is_bundle_request(request_path: str) -> bool:
    """True when the request targets the server root or the Bundle endpoint."""
    return request_path in BUNDLE_REQUEST_PATHS


def compose_identity(resource_type: str, pseudonym: str) -> str:
    """Build "<ResourceType>/<pseudonym>", or the bare pseudonym without a type."""
    if resource_type:
        return f"{resource_type}/{pseudonym}"
    return pseudonym


def resource_identity(entry: BundleEntry) -> str | None:
    """Return "<resourceType>/<id>" for an entry's resource, if it has an id."""
    if entry.resource is None:
        return None
    resource_id = entry.resource.get("id")
    if not isinstance(resource_id, str) or not resource_id:
        return None
    return compose_identity(entry.resource_type, resource_id)


@dataclass
class DeidentificationSummary:
    """Counts describing one de-identified Bundle."""

    entries_processed: int = 0
    identities_rewritten: int = 0
    references_rewritten: int = 0
    fields_cleared: int = 0
    unhandled_types: Counter[str] = field(default_factory=Counter)

    def summary(self) -> str:
        unhandled = ", ".join(f"{t}={n}" for t, n in sorted(self.unhandled_types.items())) or "none"
        return (
            f"entries={self.entries_processed} identities={self.identities_rewritten} "
            f"references={self.references_rewritten} cleared={self.fields_cleared} "
            f"unhandled=[{unhandled}]"
        )


class BundleDeidentifier:
    """De-identify every entry of a FHIR Bundle."""

    def __init__(
        self,
        config: ShieldConfig | None = None,
        pseudonymizer: Pseudonymizer | None = None,
    ) -> None:
        self._config = config or ShieldConfig()
        self._pseudonymizer = pseudonymizer or Pseudonymizer(self._config.hash_algorithm)
        self._rewriter = ReferenceRewriter(self._pseudonymizer, self._config.reference_policy)
        self._processor = ResourceProcessor(self._rewriter)

    @property
    def config(self) -> ShieldConfig:
        return self._config

    @property
    def pseudonymizer(self) -> Pseudonymizer:
        return self._pseudonymizer

    def get_request_mutation(self, request: RequestDetails) -> RequestMutation | None:
        """Return the de-identified request body, or None to pass the request through.

        Raises:
            DeidentificationError: On any fatal parse, hash or serialization failure.
        """
        if not is_bundle_request(request.request_path):
            return None

        bundle = parse_bundle(request.body, request.charset)
        result = self.deidentify(bundle)
        content = serialize_bundle(bundle)
        logger.info("De-identified Bundle for path '%s': %s", request.request_path, result.summary())
        return RequestMutation(request_content=content)

    def deidentify(self, bundle: BundleDocument) -> DeidentificationSummary:
        """Rewrite every entry of a parsed Bundle in place."""
        entries = bundle.entries
        index = DocumentIndex.from_entries((entry.full_url, entry.resource) for entry in entries)
        result = DeidentificationSummary()

        for entry in entries:
            if entry.resource is None:
                continue
            if self.rewrite_identity(entry):
                result.identities_rewritten += 1
            outcome = self._processor.process(entry.resource, index)
            result.entries_processed += 1
            result.references_rewritten += outcome.references_rewritten
            result.fields_cleared += outcome.fields_cleared
            if not outcome.handled:
                result.unhandled_types[outcome.resource_type] += 1

        return result

    def rewrite_identity(self, entry: BundleEntry) -> bool:
        """Pseudonymize entry.fullUrl and resource.id.

        The fullUrl, when present, is the source of the raw id, so the entry
        and its resource end with the same pseudonym.
        """
        resource = entry.resource
        if resource is None:
            return False

        if entry.full_url:
            raw_id = extract_id_part(entry.full_url)
        else:
            resource_id = resource.get("id")
            if not isinstance(resource_id, str) or not resource_id:
                logger.debug("Entry for %s has neither fullUrl nor id", entry.resource_type or "unknown type")
                return False
            raw_id = extract_id_part(resource_id)

        pseudonym = self._pseudonymizer.pseudonymize(raw_id)
        if entry.full_url:
            entry.full_url = compose_identity(entry.resource_type, pseudonym)
        resource["id"] = pseudonym
        return True
