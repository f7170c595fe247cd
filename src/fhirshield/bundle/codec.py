"""FHIR Bundle envelope: parse request bytes into a Bundle and back.

Only the envelope is typed (resourceType, entry[].fullUrl, entry[].resource).
Every other element, and the resources themselves, pass through as plain
JSON so nothing the de-identifier does not touch is lost.
"""

from __future__ import annotations

from typing import Any, Literal

import simplejson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fhirshield.common.constants import BUNDLE_RESOURCE_TYPE
from fhirshield.common.errors import BundleParseError, BundleSerializationError


class BundleEntry(BaseModel):
    """One Bundle.entry: optional fullUrl plus the contained resource."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    full_url: str | None = Field(default=None, alias="fullUrl")
    resource: dict[str, Any] | None = None

    @property
    def resource_type(self) -> str:
        if self.resource is None:
            return ""
        tag = self.resource.get("resourceType")
        return tag if isinstance(tag, str) else ""


class BundleDocument(BaseModel):
    """A FHIR Bundle with its entries in document order."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    resource_type: Literal["Bundle"] = Field(alias="resourceType")
    entry: list[BundleEntry] | None = None

    @property
    def entries(self) -> list[BundleEntry]:
        return self.entry or []


def parse_bundle(payload: bytes, charset: str = "utf-8") -> BundleDocument:
    """Parse a request body into a BundleDocument.

    JSON numbers with a fractional part or exponent are read as Decimal, so
    FHIR decimal precision (e.g. 1.50) is carried through to serialization.

    Raises:
        BundleParseError: If the body is not valid JSON in the given charset,
            or its root resourceType is not Bundle.
    """
    try:
        text = payload.decode(charset)
    except (UnicodeDecodeError, LookupError) as exc:
        raise BundleParseError(f"body is not valid {charset}") from exc

    try:
        document = simplejson.loads(text, use_decimal=True)
    except simplejson.JSONDecodeError as exc:
        raise BundleParseError(f"invalid JSON ({exc.msg} at line {exc.lineno} column {exc.colno})") from exc

    try:
        return BundleDocument.model_validate(document)
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        reason = first.get("msg", str(exc))
        if location:
            reason = f"{location}: {reason}"
        raise BundleParseError(f"expected a {BUNDLE_RESOURCE_TYPE} resource ({reason})") from exc


def bundle_to_dict(bundle: BundleDocument) -> dict[str, Any]:
    """Return the Bundle as FHIR JSON, absent elements omitted.

    Decimal values are kept as Decimal instances.
    """
    return bundle.model_dump(by_alias=True, exclude_none=True)


def serialize_bundle(bundle: BundleDocument) -> bytes:
    """Encode a Bundle as compact UTF-8 JSON, writing Decimals as raw numbers.

    Raises:
        BundleSerializationError: If the tree contains values JSON cannot carry.
    """
    try:
        text = simplejson.dumps(
            bundle_to_dict(bundle),
            use_decimal=True,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as exc:
        raise BundleSerializationError(str(exc)) from exc
    return text.encode("utf-8")
