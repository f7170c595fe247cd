"""Logical id extraction and deterministic pseudonyms."""

from fhirshield.pseudonym.extractor import extract_id_part, extract_type_part
from fhirshield.pseudonym.hasher import Pseudonymizer, pseudonymize

__all__ = ["extract_id_part", "extract_type_part", "Pseudonymizer", "pseudonymize"]
