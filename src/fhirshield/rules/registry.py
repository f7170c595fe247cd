"""Resource rule registry: which elements of each FHIR R4 type hold references.

Each row lists dotted element paths. A segment may address a single element
or an array; arrays are traversed at any depth, so "series.performer.actor"
reaches the actor of every performer of every series.

The registry is built and validated at import time and exposed read-only.
A ResourceType member without a row raises RegistryError on import.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final, Iterator, Mapping

from fhirshield.common.constants import ResourceType
from fhirshield.common.errors import RegistryError
from fhirshield.rules.redaction import cleared_fields_for


@dataclass(frozen=True)
class ResourceRule:
    """De-identification rule for one resource type."""

    resource_type: ResourceType
    reference_paths: tuple[str, ...] = ()
    cleared_fields: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.reference_paths and not self.cleared_fields


REFERENCE_PATHS: Final[dict[ResourceType, tuple[str, ...]]] = {
    ResourceType.ALLERGY_INTOLERANCE: (
        "patient",
        "encounter",
        "recorder",
        "asserter",
    ),
    ResourceType.APPOINTMENT: (
        "reasonReference",
        "supportingInformation",
        "slot",
        "basedOn",
        "participant.actor",
    ),
    ResourceType.CARE_PLAN: (
        "basedOn",
        "replaces",
        "partOf",
        "subject",
        "encounter",
        "author",
        "contributor",
        "careTeam",
        "addresses",
        "supportingInfo",
        "goal",
        "activity.reference",
        "activity.outcomeReference",
    ),
    ResourceType.CLAIM: (
        "patient",
        "enterer",
        "insurer",
        "provider",
        "referral",
    ),
    ResourceType.CLINICAL_IMPRESSION: (
        "subject",
        "encounter",
        "assessor",
        "previous",
        "problem",
        "prognosisReference",
        "supportingInfo",
    ),
    ResourceType.COMPOSITION: (
        "subject",
        "encounter",
        "author",
        "custodian",
    ),
    ResourceType.CONDITION: (
        "subject",
        "encounter",
        "recorder",
        "asserter",
        "stage.assessment",
        "evidence.detail",
    ),
    ResourceType.DIAGNOSTIC_REPORT: (
        "basedOn",
        "subject",
        "encounter",
        "performer",
        "resultsInterpreter",
        "specimen",
        "result",
        "imagingStudy",
    ),
    ResourceType.ENCOUNTER: (
        "subject",
        "episodeOfCare",
        "basedOn",
        "participant.individual",
        "appointment",
        "reasonReference",
        "diagnosis.condition",
        "account",
        "hospitalization.origin",
        "hospitalization.destination",
        "location.location",
        "serviceProvider",
        "partOf",
    ),
    ResourceType.EPISODE_OF_CARE: (
        "diagnosis.condition",
        "patient",
        "managingOrganization",
        "referralRequest",
        "careManager",
        "team",
        "account",
    ),
    ResourceType.HEALTHCARE_SERVICE: (
        "providedBy",
        "location",
        "coverageArea",
        "endpoint",
    ),
    ResourceType.IMAGING_STUDY: (
        "subject",
        "encounter",
        "basedOn",
        "interpreter",
        "endpoint",
        "procedureReference",
        "location",
        "reasonReference",
        "series.endpoint",
        "series.specimen",
        "series.performer.actor",
    ),
    ResourceType.IMMUNIZATION: (
        "patient",
        "encounter",
        "location",
        "manufacturer",
        "performer.actor",
        "reasonReference",
        "reaction.detail",
        "protocolApplied.authority",
    ),
    ResourceType.LIST: (
        "subject",
        "encounter",
        "source",
    ),
    ResourceType.LOCATION: (
        "managingOrganization",
        "partOf",
        "endpoint",
    ),
    ResourceType.MEDIA: (
        "basedOn",
        "partOf",
        "subject",
        "encounter",
        "operator",
        "device",
    ),
    ResourceType.MEDICATION: ("manufacturer",),
    ResourceType.MEDICATION_ADMINISTRATION: (
        "partOf",
        "subject",
        "context",
        "supportingInformation",
        "reasonReference",
        "request",
        "device",
        "eventHistory",
    ),
    ResourceType.MEDICATION_DISPENSE: (
        "partOf",
        "subject",
        "context",
        "supportingInformation",
        "location",
        "authorizingPrescription",
        "destination",
        "receiver",
        "detectedIssue",
        "eventHistory",
    ),
    ResourceType.MEDICATION_REQUEST: (
        "subject",
        "encounter",
        "supportingInformation",
        "requester",
        "performer",
        "recorder",
        "reasonReference",
        "basedOn",
        "insurance",
        "priorPrescription",
    ),
    ResourceType.MEDICATION_STATEMENT: (
        "basedOn",
        "partOf",
        "subject",
        "context",
        "informationSource",
        "derivedFrom",
        "reasonReference",
    ),
    ResourceType.OBSERVATION: (
        "basedOn",
        "partOf",
        "subject",
        "focus",
        "encounter",
        "performer",
        "specimen",
        "device",
        "hasMember",
        "derivedFrom",
    ),
    ResourceType.OPERATION_OUTCOME: (),
    ResourceType.ORGANIZATION: (
        "partOf",
        "endpoint",
    ),
    ResourceType.PATIENT: (
        "managingOrganization",
        "link.other",
    ),
    ResourceType.PRACTITIONER: (),
    ResourceType.PRACTITIONER_ROLE: (),
    ResourceType.PROCEDURE: (
        "basedOn",
        "partOf",
        "subject",
        "encounter",
        "recorder",
        "asserter",
        "location",
        "reasonReference",
        "complicationDetail",
        "usedReference",
    ),
    ResourceType.QUESTIONNAIRE_RESPONSE: (
        "basedOn",
        "partOf",
        "subject",
        "encounter",
        "author",
        "source",
    ),
    ResourceType.RELATED_PERSON: ("patient",),
    ResourceType.SERVICE_REQUEST: (
        "basedOn",
        "replaces",
        "subject",
        "encounter",
        "requester",
        "performer",
        "locationReference",
        "reasonReference",
        "insurance",
        "supportingInfo",
        "specimen",
        "relevantHistory",
    ),
    ResourceType.SPECIMEN: (
        "subject",
        "parent",
        "request",
    ),
}


def build_registry(
    reference_paths: Mapping[ResourceType, tuple[str, ...]] = REFERENCE_PATHS,
) -> dict[ResourceType, ResourceRule]:
    """Combine reference paths and cleared fields into one rule per type."""
    return {
        resource_type: ResourceRule(
            resource_type=resource_type,
            reference_paths=paths,
            cleared_fields=cleared_fields_for(resource_type),
        )
        for resource_type, paths in reference_paths.items()
    }


def validate_registry(rules: Mapping[ResourceType, ResourceRule]) -> None:
    """Check that every ResourceType has exactly one consistent rule.

    Raises:
        RegistryError: listing every problem found.
    """
    problems: list[str] = []

    for resource_type in ResourceType:
        if resource_type not in rules:
            problems.append(f"no rule for {resource_type}")

    for key, rule in rules.items():
        if rule.resource_type != key:
            problems.append(f"rule for {key} is declared as {rule.resource_type}")
        # a repeated path would pseudonymize an already pseudonymized reference
        seen: set[str] = set()
        for path in rule.reference_paths:
            if not path or any(not segment for segment in path.split(".")):
                problems.append(f"{key}: malformed path '{path}'")
            if path in seen:
                problems.append(f"{key}: duplicate path '{path}'")
            seen.add(path)
        if len(set(rule.cleared_fields)) != len(rule.cleared_fields):
            problems.append(f"{key}: duplicate cleared field")
        overlap = set(rule.cleared_fields) & {p.split(".")[0] for p in rule.reference_paths}
        if overlap:
            problems.append(f"{key}: fields both rewritten and cleared: {sorted(overlap)}")

    if problems:
        raise RegistryError(problems)


def iter_references(resource: dict[str, Any], path: str) -> Iterator[dict[str, Any]]:
    """Yield every Reference element reachable from a resource via a dotted path.

    Absent elements and non-object values are skipped.
    """
    nodes: list[Any] = [resource]
    for segment in path.split("."):
        next_nodes: list[Any] = []
        for node in nodes:
            if not isinstance(node, dict):
                continue
            value = node.get(segment)
            if isinstance(value, list):
                next_nodes.extend(value)
            elif value is not None:
                next_nodes.append(value)
        nodes = next_nodes

    for node in nodes:
        if isinstance(node, dict):
            yield node


def _load_rules() -> Mapping[ResourceType, ResourceRule]:
    rules = build_registry()
    validate_registry(rules)
    return MappingProxyType(rules)


RULES: Final[Mapping[ResourceType, ResourceRule]] = _load_rules()


def get_rule(resource_type: str) -> ResourceRule | None:
    """Return the rule for a resource type tag, or None if the tag is not handled."""
    try:
        return RULES[ResourceType(resource_type)]
    except ValueError:
        return None
