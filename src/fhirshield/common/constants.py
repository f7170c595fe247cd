"""Constants and enums for fhirshield."""

from enum import StrEnum
from typing import Final


class ResourceType(StrEnum):
    """FHIR R4 resource types with an explicit de-identification rule."""

    ALLERGY_INTOLERANCE = "AllergyIntolerance"
    APPOINTMENT = "Appointment"
    CARE_PLAN = "CarePlan"
    CLAIM = "Claim"
    CLINICAL_IMPRESSION = "ClinicalImpression"
    COMPOSITION = "Composition"
    CONDITION = "Condition"
    DIAGNOSTIC_REPORT = "DiagnosticReport"
    ENCOUNTER = "Encounter"
    EPISODE_OF_CARE = "EpisodeOfCare"
    HEALTHCARE_SERVICE = "HealthcareService"
    IMAGING_STUDY = "ImagingStudy"
    IMMUNIZATION = "Immunization"
    LIST = "List"
    LOCATION = "Location"
    MEDIA = "Media"
    MEDICATION = "Medication"
    MEDICATION_ADMINISTRATION = "MedicationAdministration"
    MEDICATION_DISPENSE = "MedicationDispense"
    MEDICATION_REQUEST = "MedicationRequest"
    MEDICATION_STATEMENT = "MedicationStatement"
    OBSERVATION = "Observation"
    OPERATION_OUTCOME = "OperationOutcome"
    ORGANIZATION = "Organization"
    PATIENT = "Patient"
    PRACTITIONER = "Practitioner"
    PRACTITIONER_ROLE = "PractitionerRole"
    PROCEDURE = "Procedure"
    QUESTIONNAIRE_RESPONSE = "QuestionnaireResponse"
    RELATED_PERSON = "RelatedPerson"
    SERVICE_REQUEST = "ServiceRequest"
    SPECIMEN = "Specimen"


class ReferencePolicy(StrEnum):
    """How the target of a reference is treated."""

    PSEUDONYMIZE = "pseudonymize"  # rewrite target and drop display
    DISPLAY_ONLY = "display_only"  # drop display, keep target verbatim


BUNDLE_RESOURCE_TYPE: Final[str] = "Bundle"

# Request paths that address the server root or the Bundle endpoint
BUNDLE_REQUEST_PATHS: Final[frozenset[str]] = frozenset({"", BUNDLE_RESOURCE_TYPE})

REFERENCE_DELIMITERS: Final[str] = ":/"

DEFAULT_HASH_ALGORITHM: Final[str] = "sha256"
MIN_DIGEST_BITS: Final[int] = 256

__all__ = [
    "ResourceType",
    "ReferencePolicy",
    "BUNDLE_RESOURCE_TYPE",
    "BUNDLE_REQUEST_PATHS",
    "REFERENCE_DELIMITERS",
    "DEFAULT_HASH_ALGORITHM",
    "MIN_DIGEST_BITS",
]
