"""Instruction prompts for turning nameplate OCR text into a record."""

from platerelay.types import RecordFormat

# Order matters: the record parser maps these names onto EquipmentRecord fields.
RECORD_FIELDS = (
    "device type",
    "name",
    "color",
    "brand",
    "last maintenance date",
    "contact phone",
    "contact website",
    "manufacturer",
)

_FORMAT_DIRECTIVE = (
    "Format the provided equipment label text in {fmt}. "
    "Return a single {fmt} object containing exactly these properties: {fields}. "
    "Do not wrap the output in markdown or code fences. "
    "If no value is present for a property, return null for it."
)


def format_directive(record_format: RecordFormat = RecordFormat.JSON) -> str:
    """System directive naming the target schema for the chosen output format."""
    fmt = "JSON" if record_format == RecordFormat.JSON else "YAML"
    return _FORMAT_DIRECTIVE.format(fmt=fmt, fields=", ".join(RECORD_FIELDS))
