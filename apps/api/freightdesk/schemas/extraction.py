"""Schemas for freight document extraction."""

import re

from pydantic import ConfigDict, Field, field_validator, model_validator

from freightdesk.schemas.common import BaseSchema

_WEIGHT_UNIT_RE = re.compile(r"(?i)\s*(lbs?|pounds?)\.?\s*$")


class ExtractionRequest(BaseSchema):
    """Either raw document text or a base64 image."""

    document_text: str | None = Field(None, alias="documentText")
    image_base64: str | None = Field(None, alias="imageBase64")
    mime_type: str | None = Field(None, alias="mimeType")


class ExtractedShipment(BaseSchema):
    """Fields pulled from a bill of lading, rate confirmation, or similar.

    Every field is always present in the serialized form; anything the
    document does not state is ``None``.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    origin_city: str | None = None
    origin_state: str | None = None
    destination_city: str | None = None
    destination_state: str | None = None
    shipper_name: str | None = None
    consignee_name: str | None = None
    weight: float | None = None
    po_number: str | None = None
    pickup_date: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: object) -> object:
        if isinstance(data, dict):
            return {k: (None if v == "" else v) for k, v in data.items()}
        return data

    @field_validator("weight", mode="before")
    @classmethod
    def _strip_units(cls, v: object) -> object:
        # "12,500 lbs" -> "12500"
        if isinstance(v, str):
            v = _WEIGHT_UNIT_RE.sub("", v.replace(",", ""))
            return v.strip() or None
        return v
