"""Exception hierarchy for fhirshield.

Every exception here is fatal for the request that raised it: the caller
must not forward a partially de-identified payload.
"""

from __future__ import annotations

from typing import Sequence


class DeidentificationError(Exception):
    """Base class for all de-identification failures."""


class HashAlgorithmUnavailableError(DeidentificationError):
    """Raised when the configured digest cannot be used for pseudonyms."""

    def __init__(self, algorithm: str, reason: str) -> None:
        self.algorithm = algorithm
        self.reason = reason
        super().__init__(f"Hash algorithm unavailable: algorithm={algorithm} reason={reason}")


class RegistryError(DeidentificationError):
    """Raised when the resource rule registry is incomplete or inconsistent."""

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid resource rule registry: " + "; ".join(self.problems))


class BundleParseError(DeidentificationError):
    """Raised when a request payload is not a FHIR Bundle."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot parse request as Bundle: {reason}")


class BundleSerializationError(DeidentificationError):
    """Raised when the de-identified Bundle cannot be encoded."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot serialize Bundle: {reason}")


__all__ = [
    "DeidentificationError",
    "HashAlgorithmUnavailableError",
    "RegistryError",
    "BundleParseError",
    "BundleSerializationError",
]
