"""Tests for the resource rule registry and redaction table."""

import copy

import pytest

from fhirshield.common.constants import ResourceType
from fhirshield.common.errors import RegistryError
from fhirshield.deid.processor import ResourceProcessor
from fhirshield.deid.rewriter import ReferenceRewriter
from fhirshield.pseudonym.hasher import Pseudonymizer, pseudonymize
from fhirshield.rules.redaction import CLEARED_FIELDS, clear_fields, cleared_fields_for
from fhirshield.rules.registry import (
    REFERENCE_PATHS,
    RULES,
    ResourceRule,
    build_registry,
    get_rule,
    iter_references,
    validate_registry,
)


def _nest(path: str, leaf: dict) -> dict:
    """Build the element tree a dotted path addresses, with arrays in between."""
    segments = path.split(".")
    value: object = leaf
    for segment in reversed(segments[1:]):
        value = [{segment: value}]
    return {segments[0]: value}


def _patient_resource() -> dict:
    return {
        "resourceType": "Patient",
        "id": "patient-1",
        "identifier": [{"system": "http://hospital.org/mrn", "value": "MRN12345"}],
        "extension": [{"url": "http://hl7.org/fhir/us/core/StructureDefinition/us-core-race"}],
        "name": [{"family": "Doe", "given": ["Jane"]}],
        "telecom": [{"system": "phone", "value": "555-123-4567"}],
        "address": [{"city": "Springfield", "state": "IL"}],
        "photo": [{"contentType": "image/png", "data": "iVBORw0KGgo="}],
        "contact": [{"name": {"family": "Doe"}}],
        "gender": "female",
        "birthDate": "1990-01-15",
        "managingOrganization": {"reference": "Organization/org-1", "display": "General Hospital"},
    }


REFERENCE_ROWS = [
    (resource_type, path)
    for resource_type, rule in RULES.items()
    for path in rule.reference_paths
]


# ── Registry completeness tests ──


class TestRegistry:
    def test_every_resource_type_has_a_rule(self) -> None:
        assert set(RULES) == set(ResourceType)

    def test_rule_keys_match_rule_types(self) -> None:
        for resource_type, rule in RULES.items():
            assert rule.resource_type is resource_type

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            RULES[ResourceType.PATIENT] = ResourceRule(ResourceType.PATIENT)  # type: ignore[index]

    def test_rules_are_frozen(self) -> None:
        with pytest.raises(AttributeError):
            RULES[ResourceType.PATIENT].reference_paths = ()  # type: ignore[misc]

    def test_shipped_registry_validates(self) -> None:
        validate_registry(RULES)

    def test_reference_paths_cover_every_type(self) -> None:
        assert set(REFERENCE_PATHS) == set(ResourceType)

    def test_empty_rows(self) -> None:
        for resource_type in (
            ResourceType.OPERATION_OUTCOME,
            ResourceType.PRACTITIONER,
            ResourceType.PRACTITIONER_ROLE,
        ):
            assert RULES[resource_type].is_empty

    def test_get_rule_known_type(self) -> None:
        rule = get_rule("Encounter")
        assert rule is not None
        assert rule.resource_type == ResourceType.ENCOUNTER
        assert "participant.individual" in rule.reference_paths

    def test_get_rule_unknown_type(self) -> None:
        assert get_rule("Basic") is None
        assert get_rule("Bundle") is None
        assert get_rule("observation") is None

    def test_missing_row_detected(self) -> None:
        rules = dict(RULES)
        del rules[ResourceType.CARE_PLAN]
        with pytest.raises(RegistryError, match="no rule for CarePlan"):
            validate_registry(rules)

    def test_duplicate_path_detected(self) -> None:
        rules = dict(RULES)
        rules[ResourceType.OBSERVATION] = ResourceRule(
            ResourceType.OBSERVATION, reference_paths=("subject", "hasMember", "hasMember")
        )
        with pytest.raises(RegistryError, match="duplicate path 'hasMember'"):
            validate_registry(rules)

    def test_mismatched_row_detected(self) -> None:
        rules = dict(RULES)
        rules[ResourceType.CLAIM] = ResourceRule(ResourceType.CONDITION)
        with pytest.raises(RegistryError, match="declared as Condition"):
            validate_registry(rules)

    def test_malformed_path_detected(self) -> None:
        rules = dict(RULES)
        rules[ResourceType.LIST] = ResourceRule(ResourceType.LIST, reference_paths=("entry..item",))
        with pytest.raises(RegistryError, match="malformed path"):
            validate_registry(rules)

    def test_cleared_and_rewritten_overlap_detected(self) -> None:
        rules = dict(RULES)
        rules[ResourceType.PATIENT] = ResourceRule(
            ResourceType.PATIENT,
            reference_paths=("managingOrganization",),
            cleared_fields=("managingOrganization",),
        )
        with pytest.raises(RegistryError, match="both rewritten and cleared"):
            validate_registry(rules)

    def test_registry_error_lists_every_problem(self) -> None:
        with pytest.raises(RegistryError) as exc_info:
            validate_registry({})
        assert len(exc_info.value.problems) == len(ResourceType)

    def test_build_registry_attaches_cleared_fields(self) -> None:
        rules = build_registry()
        assert rules[ResourceType.PATIENT].cleared_fields == CLEARED_FIELDS[ResourceType.PATIENT]
        assert rules[ResourceType.OBSERVATION].cleared_fields == ()


# ── iter_references tests ──


class TestIterReferences:
    def test_singular_element(self) -> None:
        resource = {"subject": {"reference": "Patient/1"}}
        assert list(iter_references(resource, "subject")) == [{"reference": "Patient/1"}]

    def test_repeated_element(self) -> None:
        resource = {"performer": [{"reference": "Practitioner/1"}, {"reference": "Practitioner/2"}]}
        assert len(list(iter_references(resource, "performer"))) == 2

    def test_nested_arrays(self) -> None:
        resource = {
            "series": [
                {"performer": [{"actor": {"reference": "Practitioner/1"}}, {"actor": {"reference": "Practitioner/2"}}]},
                {"performer": []},
                {"uid": "1.2.3"},
            ]
        }
        refs = list(iter_references(resource, "series.performer.actor"))
        assert [r["reference"] for r in refs] == ["Practitioner/1", "Practitioner/2"]

    def test_nested_singular(self) -> None:
        resource = {"hospitalization": {"origin": {"reference": "Location/1"}}}
        assert len(list(iter_references(resource, "hospitalization.origin"))) == 1

    def test_absent_element(self) -> None:
        assert list(iter_references({"status": "final"}, "subject")) == []
        assert list(iter_references({}, "participant.actor")) == []

    def test_non_object_values_skipped(self) -> None:
        resource = {"subject": "Patient/1", "performer": ["x", {"reference": "Practitioner/1"}]}
        assert list(iter_references(resource, "subject")) == []
        assert len(list(iter_references(resource, "performer"))) == 1

    def test_yields_original_objects(self) -> None:
        subject = {"reference": "Patient/1"}
        resource = {"subject": subject}
        assert next(iter_references(resource, "subject")) is subject


# ── Per-row rewriting tests ──


class TestEveryRuleRow:
    @pytest.mark.parametrize(
        ("resource_type", "path"),
        REFERENCE_ROWS,
        ids=[f"{rt}.{path}" for rt, path in REFERENCE_ROWS],
    )
    def test_reference_at_path_is_rewritten(self, resource_type: ResourceType, path: str) -> None:
        leaf = {"reference": "Patient/abc", "display": "Jane Doe"}
        resource = {"resourceType": str(resource_type), **_nest(path, leaf)}
        processor = ResourceProcessor(ReferenceRewriter(Pseudonymizer()))

        outcome = processor.process(resource)

        assert outcome.handled is True
        assert outcome.references_rewritten == 1
        assert leaf == {"reference": f"Patient/{pseudonymize('abc')}"}


# ── Redaction tests ──


class TestRedaction:
    def test_patient_fields_listed(self) -> None:
        assert cleared_fields_for(ResourceType.PATIENT) == (
            "identifier", "extension", "name", "telecom", "address", "photo", "contact",
        )

    def test_other_types_clear_nothing(self) -> None:
        assert cleared_fields_for(ResourceType.OBSERVATION) == ()

    def test_clear_fields_removes_elements(self) -> None:
        resource = _patient_resource()
        removed = clear_fields(resource, cleared_fields_for(ResourceType.PATIENT))
        assert removed == 7
        for name in CLEARED_FIELDS[ResourceType.PATIENT]:
            assert name not in resource

    def test_clear_fields_keeps_other_elements(self) -> None:
        resource = _patient_resource()
        original = copy.deepcopy(resource)
        clear_fields(resource, cleared_fields_for(ResourceType.PATIENT))
        for name in ("resourceType", "id", "gender", "birthDate", "managingOrganization"):
            assert resource[name] == original[name]

    def test_clear_fields_counts_only_present(self) -> None:
        resource = {"resourceType": "Patient", "name": [{"family": "Doe"}]}
        assert clear_fields(resource, ("name", "telecom")) == 1
        assert clear_fields(resource, ("name",)) == 0

    def test_patient_processing_redacts_and_rewrites(self) -> None:
        resource = _patient_resource()
        resource["link"] = [{"other": {"reference": "RelatedPerson/rp-1", "display": "John Doe"}, "type": "seealso"}]
        processor = ResourceProcessor(ReferenceRewriter(Pseudonymizer()))

        outcome = processor.process(resource)

        assert outcome.fields_cleared == 7
        assert outcome.references_rewritten == 2
        for name in CLEARED_FIELDS[ResourceType.PATIENT]:
            assert name not in resource
        assert resource["gender"] == "female"
        assert resource["birthDate"] == "1990-01-15"
        assert resource["managingOrganization"] == {"reference": f"Organization/{pseudonymize('org-1')}"}
        assert resource["link"][0]["other"] == {"reference": f"RelatedPerson/{pseudonymize('rp-1')}"}
        assert resource["link"][0]["type"] == "seealso"
