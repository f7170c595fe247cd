#!/usr/bin/env python3
"""
fhirshield Demo Script.

This script demonstrates the de-identification engine on a small
transaction Bundle. It simulates:
1. A gateway receiving a Bundle submission on the server root.
2. The access decision rewriting the request body before forwarding.

Usage:
    python demo.py
"""

import sys
import os
import json
import logging

# Ensure src is in python path
sys.path.append(os.path.join(os.getcwd(), "src"))

try:
    from fhirshield.common.config import ShieldConfig
    from fhirshield.common.schemas import RequestDetails
    from fhirshield.gateway.access import MutatingAccessDecision
except ImportError as e:
    print(f"Error importing modules: {e}")
    print("Please ensure you have installed dependencies via pip install -e .")
    sys.exit(1)

SAMPLE_BUNDLE = {
    "resourceType": "Bundle",
    "type": "transaction",
    "entry": [
        {
            "fullUrl": "urn:uuid:61ebe359-bfdc-4613-8bf2-c5e300945f0a",
            "resource": {
                "resourceType": "Patient",
                "identifier": [{"system": "http://hospital.example.org/mrn", "value": "MRN12345"}],
                "name": [{"family": "Doe", "given": ["Jane"]}],
                "telecom": [{"system": "phone", "value": "555-123-4567"}],
                "gender": "female",
                "birthDate": "1990-01-15",
            },
            "request": {"method": "POST", "url": "Patient"},
        },
        {
            "fullUrl": "urn:uuid:88f151c0-a954-468a-88bd-5ae15c08e059",
            "resource": {
                "resourceType": "Encounter",
                "status": "finished",
                "class": {"system": "http://terminology.hl7.org/CodeSystem/v3-ActCode", "code": "AMB"},
                "subject": {"reference": "urn:uuid:61ebe359-bfdc-4613-8bf2-c5e300945f0a", "display": "Jane Doe"},
                "participant": [{"individual": {"reference": "Practitioner/dr-7", "display": "Dr. Smith"}}],
            },
            "request": {"method": "POST", "url": "Encounter"},
        },
        {
            "fullUrl": "urn:uuid:4c1b8c3e-0d1a-4f6e-9d57-2d7f2b8e6a11",
            "resource": {
                "resourceType": "Observation",
                "status": "final",
                "code": {"coding": [{"system": "http://loinc.org", "code": "8867-4", "display": "Heart rate"}]},
                "subject": {"reference": "urn:uuid:61ebe359-bfdc-4613-8bf2-c5e300945f0a"},
                "encounter": {"reference": "urn:uuid:88f151c0-a954-468a-88bd-5ae15c08e059"},
                "valueQuantity": {"value": 72, "unit": "beats/minute"},
            },
            "request": {"method": "POST", "url": "Observation"},
        },
    ],
}


def main():
    config = ShieldConfig()
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print("==================================================")
    print("   fhirshield Bundle De-identification Demo")
    print("==================================================")
    print(f"Hash algorithm:   {config.hash_algorithm}")
    print(f"Reference policy: {config.reference_policy}")

    decision = MutatingAccessDecision.access_granted(config)
    body = json.dumps(SAMPLE_BUNDLE).encode("utf-8")

    print("\n[1] Request to 'Patient' (not a Bundle submission)...")
    mutation = decision.get_request_mutation(RequestDetails(request_path="Patient", body=body))
    print("    -> passed through unchanged" if mutation is None else "    -> unexpectedly mutated")

    print("\n[2] Request to server root with a transaction Bundle...")
    mutation = decision.get_request_mutation(RequestDetails(request_path="", body=body))
    if mutation is None:
        print("    -> not mutated")
        return

    print("    -> de-identified Bundle:")
    print(json.dumps(json.loads(mutation.request_content), indent=2))


if __name__ == "__main__":
    main()
