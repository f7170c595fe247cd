"""Per-resource dispatch of reference rewriting and field clearing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fhirshield.common.constants import ResourceType
from fhirshield.deid.index import DocumentIndex
from fhirshield.deid.rewriter import ReferenceRewriter
from fhirshield.rules.redaction import clear_fields
from fhirshield.rules.registry import RULES, ResourceRule, iter_references

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceOutcome:
    """What processing changed inside one resource."""

    resource_type: str
    handled: bool
    references_rewritten: int = 0
    fields_cleared: int = 0


def resolve_resource_type(resource: dict[str, Any]) -> ResourceType | None:
    """Map a resource's resourceType tag onto the closed set, or None."""
    tag = resource.get("resourceType")
    if not isinstance(tag, str):
        return None
    try:
        return ResourceType(tag)
    except ValueError:
        return None


class ResourceProcessor:
    """Apply the registry rule of a resource's type to the resource."""

    def __init__(self, rewriter: ReferenceRewriter) -> None:
        self._rewriter = rewriter

    def process(self, resource: dict[str, Any], index: DocumentIndex | None = None) -> ResourceOutcome:
        tag = str(resource.get("resourceType", ""))
        match resolve_resource_type(resource):
            case ResourceType() as resource_type:
                return self._apply_rule(resource, RULES[resource_type], index)
            case _:
                logger.warning("Unhandled resource type '%s': fields left as-is", tag)
                return ResourceOutcome(resource_type=tag, handled=False)

    def _apply_rule(
        self,
        resource: dict[str, Any],
        rule: ResourceRule,
        index: DocumentIndex | None,
    ) -> ResourceOutcome:
        rewritten = 0
        for path in rule.reference_paths:
            for reference in iter_references(resource, path):
                if self._rewriter.rewrite(reference, index):
                    rewritten += 1

        cleared = clear_fields(resource, rule.cleared_fields)
        if rule.is_empty:
            logger.debug("%s has no reference or redaction rules", rule.resource_type)

        return ResourceOutcome(
            resource_type=rule.resource_type,
            handled=True,
            references_rewritten=rewritten,
            fields_cleared=cleared,
        )
