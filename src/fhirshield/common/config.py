"""Application configuration using Pydantic Settings."""

from typing import Literal

from pydantic_settings import BaseSettings

from fhirshield.common.constants import DEFAULT_HASH_ALGORITHM, ReferencePolicy


class ShieldConfig(BaseSettings):
    """Application configuration loaded from environment variables."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    reference_policy: ReferencePolicy = ReferencePolicy.PSEUDONYMIZE

    model_config = {"env_prefix": "FHIRSHIELD_", "case_sensitive": False}


__all__ = ["ShieldConfig"]
