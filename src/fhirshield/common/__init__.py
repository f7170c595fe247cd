"""Common constants, configuration and schemas for fhirshield."""

from fhirshield.common.constants import (
    BUNDLE_RESOURCE_TYPE,
    ReferencePolicy,
    ResourceType,
)
from fhirshield.common.config import ShieldConfig
from fhirshield.common.errors import (
    BundleParseError,
    BundleSerializationError,
    DeidentificationError,
    HashAlgorithmUnavailableError,
    RegistryError,
)
from fhirshield.common.schemas import RequestDetails, RequestMutation

__all__ = [
    "ResourceType",
    "ReferencePolicy",
    "BUNDLE_RESOURCE_TYPE",
    "ShieldConfig",
    "DeidentificationError",
    "HashAlgorithmUnavailableError",
    "RegistryError",
    "BundleParseError",
    "BundleSerializationError",
    "RequestDetails",
    "RequestMutation",
]
