"""Per-resource-type de-identification rules."""

from fhirshield.rules.redaction import CLEARED_FIELDS, clear_fields
from fhirshield.rules.registry import (
    RULES,
    ResourceRule,
    get_rule,
    iter_references,
    validate_registry,
)

__all__ = [
    "RULES",
    "ResourceRule",
    "get_rule",
    "iter_references",
    "validate_registry",
    "CLEARED_FIELDS",
    "clear_fields",
]
