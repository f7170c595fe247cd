"""Rewriting of a single FHIR Reference element."""

from __future__ import annotations

import logging
from typing import Any

from fhirshield.common.constants import ReferencePolicy
from fhirshield.deid.index import DocumentIndex
from fhirshield.pseudonym.extractor import extract_id_part, extract_type_part
from fhirshield.pseudonym.hasher import Pseudonymizer

logger = logging.getLogger(__name__)

LOCAL_REFERENCE_PREFIX = "#"


def _looks_like_resource_type(value: str) -> bool:
    return value.isalpha() and value[0].isupper()


class ReferenceRewriter:
    """Strip display labels and pseudonymize reference targets.

    Under ReferencePolicy.PSEUDONYMIZE the target becomes
    "<TargetType>/<pseudonym>", matching the identity the target entry gets,
    so the reference still resolves. Under ReferencePolicy.DISPLAY_ONLY only
    the display label is removed.
    """

    def __init__(
        self,
        pseudonymizer: Pseudonymizer,
        policy: ReferencePolicy = ReferencePolicy.PSEUDONYMIZE,
    ) -> None:
        self._pseudonymizer = pseudonymizer
        self._policy = policy

    @property
    def policy(self) -> ReferencePolicy:
        return self._policy

    def rewrite(self, reference: dict[str, Any], index: DocumentIndex | None = None) -> bool:
        """Rewrite one Reference in place.

        Returns:
            True if the target string was pseudonymized.
        """
        reference.pop("display", None)

        if self._policy is ReferencePolicy.DISPLAY_ONLY:
            return False

        target = reference.get("reference")
        if not isinstance(target, str) or not target:
            return False
        if target.startswith(LOCAL_REFERENCE_PREFIX):
            # points at a contained resource whose id is not rewritten
            return False

        pseudonym = self._pseudonymizer.pseudonymize(extract_id_part(target))
        target_type = self.resolve_target_type(reference, target, index)
        if target_type:
            reference["reference"] = f"{target_type}/{pseudonym}"
        else:
            logger.debug("No target type for reference, writing bare pseudonym %s", pseudonym)
            reference["reference"] = pseudonym
        return True

    @staticmethod
    def resolve_target_type(
        reference: dict[str, Any],
        target: str,
        index: DocumentIndex | None = None,
    ) -> str | None:
        """Determine the resource type a reference points to."""
        declared = reference.get("type")
        if isinstance(declared, str) and declared:
            # type may be a bare name or a StructureDefinition URL
            return extract_id_part(declared)

        prefix = extract_type_part(target)
        if prefix and _looks_like_resource_type(prefix):
            return prefix

        if index is not None:
            return index.resource_type_of(target)
        return None
