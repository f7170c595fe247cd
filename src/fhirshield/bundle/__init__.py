"""FHIR Bundle envelope parsing and serialization."""

from fhirshield.bundle.codec import (
    BundleDocument,
    BundleEntry,
    bundle_to_dict,
    parse_bundle,
    serialize_bundle,
)

__all__ = [
    "BundleDocument",
    "BundleEntry",
    "bundle_to_dict",
    "parse_bundle",
    "serialize_bundle",
]
