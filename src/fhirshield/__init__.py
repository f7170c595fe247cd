"""fhirshield: pseudonymizing de-identification for FHIR Bundles."""
