"""Request-scoped types flowing through the relay pipeline."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ImageUpload(BaseModel):
    data: bytes
    content_type: str = ""
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


class AnnotationResult(BaseModel):
    text: str
    labels: list[str] = Field(default_factory=list)  # lower-cased, provider confidence order


class EquipmentRecord(BaseModel):
    """Equipment metadata read off a nameplate. Absent fields are None, never omitted."""

    device_type: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    last_maintenance_date: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_website: Optional[str] = None
    manufacturer: Optional[str] = None


class FormattedRecord(BaseModel):
    raw: str
    record: Optional[EquipmentRecord] = None

    @property
    def parsed(self) -> bool:
        return self.record is not None


class ResponseEnvelope(BaseModel):
    """Wire envelope. Exactly one of ``data`` / ``error`` is set; None fields are not serialized."""

    success: Optional[bool] = None
    data: Optional[str] = None
    record: Optional[EquipmentRecord] = None
    error: Optional[str] = None
    details: Optional[str] = None

    @classmethod
    def ok(cls, formatted: FormattedRecord) -> ResponseEnvelope:
        return cls(success=True, data=formatted.raw, record=formatted.record)

    @classmethod
    def fail(cls, error: str, details: str | None = None) -> ResponseEnvelope:
        return cls(error=error, details=details)

    def to_wire(self) -> dict:
        wire = self.model_dump(exclude={"record"}, exclude_none=True)
        if self.record is not None:
            # record fields stay present as null
            wire["record"] = self.record.model_dump()
        return wire
