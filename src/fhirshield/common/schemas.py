"""Pydantic v2 schemas for the gateway request boundary."""

from __future__ import annotations

import codecs
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RequestDetails(BaseModel):
    """Inbound request as seen by the access decision."""

    model_config = ConfigDict(frozen=True)

    request_path: str = Field(description="FHIR path relative to the server base, e.g. 'Bundle'")
    body: bytes = Field(default=b"", repr=False)
    charset: str = "utf-8"

    @model_validator(mode="before")
    @classmethod
    def check_charset(cls, data: Any) -> Any:
        """Reject charsets Python cannot decode with."""
        if isinstance(data, dict) and data.get("charset"):
            try:
                codecs.lookup(data["charset"])
            except LookupError as exc:
                raise ValueError(f"Unknown charset: {data['charset']}") from exc
        return data


class RequestMutation(BaseModel):
    """Replacement request content produced by the access decision."""

    model_config = ConfigDict(frozen=True)

    request_content: bytes = Field(repr=False)


__all__ = ["RequestDetails", "RequestMutation"]
