"""Bundle de-identification engine."""

from fhirshield.deid.index import DocumentIndex
from fhirshield.deid.orchestrator import (
    BundleDeidentifier,
    DeidentificationSummary,
    is_bundle_request,
    resource_identity,
)
from fhirshield.deid.processor import ResourceOutcome, ResourceProcessor
from fhirshield.deid.rewriter import ReferenceRewriter

__all__ = [
    "BundleDeidentifier",
    "DeidentificationSummary",
    "DocumentIndex",
    "ReferenceRewriter",
    "ResourceOutcome",
    "ResourceProcessor",
    "is_bundle_request",
    "resource_identity",
]
