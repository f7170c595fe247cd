"""Gateway-facing access decision."""

from fhirshield.gateway.access import MutatingAccessDecision

__all__ = ["MutatingAccessDecision"]
