"""Access decision that grants every request and de-identifies Bundle submissions."""

from __future__ import annotations

from typing import Any

from fhirshield.common.config import ShieldConfig
from fhirshield.common.schemas import RequestDetails, RequestMutation
from fhirshield.deid.orchestrator import BundleDeidentifier


class MutatingAccessDecision:
    """Grant access and rewrite the request body before it is forwarded.

    Only request bodies are rewritten; responses pass through untouched.
    """

    def __init__(self, deidentifier: BundleDeidentifier) -> None:
        self._deidentifier = deidentifier

    @classmethod
    def access_granted(cls, config: ShieldConfig | None = None) -> MutatingAccessDecision:
        """Build a decision backed by a de-identifier for the given config."""
        return cls(BundleDeidentifier(config))

    def can_access(self) -> bool:
        return True

    def get_request_mutation(self, request: RequestDetails) -> RequestMutation | None:
        """Return the replacement body, or None when the request is not a Bundle submission."""
        return self._deidentifier.get_request_mutation(request)

    def post_process(self, request: RequestDetails, response: Any) -> str | None:
        """Return replacement response content; None keeps the upstream response."""
        return None


__all__ = ["MutatingAccessDecision"]
