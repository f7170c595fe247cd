"""Deterministic pseudonyms for FHIR logical ids.

Replaces each logical id with the hex digest of a 256-bit class hash.
The function is pure (no salt, no counter, no cache), so the same id
maps to the same pseudonym in every entry, request and process. That
purity is what keeps references resolvable after rewriting.
"""

from __future__ import annotations

import hashlib
import logging

from fhirshield.common.constants import DEFAULT_HASH_ALGORITHM, MIN_DIGEST_BITS
from fhirshield.common.errors import HashAlgorithmUnavailableError

logger = logging.getLogger(__name__)


class Pseudonymizer:
    """One-way mapping from logical id to fixed-length lowercase hex digest."""

    def __init__(self, algorithm: str = DEFAULT_HASH_ALGORITHM) -> None:
        self._algorithm = algorithm
        self._digest_size = self._probe(algorithm)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def pseudonym_length(self) -> int:
        """Number of hex characters in every pseudonym."""
        return self._digest_size * 2

    def pseudonymize(self, value: str) -> str:
        """Return the pseudonym for a logical id."""
        if value is None:
            msg = "Cannot pseudonymize None"
            raise TypeError(msg)
        digest = hashlib.new(self._algorithm, value.encode("utf-8"))
        return digest.hexdigest()

    @staticmethod
    def _probe(algorithm: str) -> int:
        """Resolve the algorithm once so an unusable digest fails fast."""
        try:
            digest = hashlib.new(algorithm)
        except (ValueError, TypeError) as exc:
            raise HashAlgorithmUnavailableError(algorithm, str(exc)) from exc

        if digest.digest_size == 0:
            # variable-length digests (shake_*) have no fixed hexdigest
            raise HashAlgorithmUnavailableError(algorithm, "variable-length digest")
        if digest.digest_size * 8 < MIN_DIGEST_BITS:
            raise HashAlgorithmUnavailableError(
                algorithm,
                f"digest is {digest.digest_size * 8} bits, need at least {MIN_DIGEST_BITS}",
            )
        logger.debug("Pseudonymizer using %s (%d-bit digest)", algorithm, digest.digest_size * 8)
        return digest.digest_size


_default_pseudonymizer = Pseudonymizer()


def pseudonymize(value: str) -> str:
    """Pseudonymize with the default SHA-256 pseudonymizer."""
    return _default_pseudonymizer.pseudonymize(value)
