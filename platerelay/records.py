"""Schema-checked parse of the formatter's raw output.

The language model is only *asked* to follow the record layout. This module
checks what came back and degrades to ``Unparseable`` instead of raising, so a
malformed completion never turns into a failed request.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union

import yaml

from platerelay.models import EquipmentRecord

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*\n(.*?)\n?\s*```\s*$", re.DOTALL)
_KEY_SEP_RE = re.compile(r"[\s\-]+")

_FIELDS = frozenset(EquipmentRecord.model_fields)


@dataclass(frozen=True)
class Parsed:
    record: EquipmentRecord


@dataclass(frozen=True)
class Unparseable:
    raw: str
    reason: str = ""


ParseResult = Union[Parsed, Unparseable]


def strip_code_fence(raw: str) -> str:
    """Remove a surrounding markdown code fence, if the model added one anyway."""
    match = _FENCE_RE.match(raw)
    return match.group(1) if match else raw


def normalize_key(key: object) -> str:
    """``"Device Type"``, ``"device-type"`` and ``"device_type"`` all become ``device_type``."""
    return _KEY_SEP_RE.sub("_", str(key).strip().lower())


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        pass
    # YAML output, or JSON that strict json rejects
    return yaml.safe_load(text)


def _coerce(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    raise TypeError(f"expected a scalar, got {type(value).__name__}")


def parse_record(raw: str) -> ParseResult:
    """Parse JSON or YAML model output into an EquipmentRecord."""
    if not raw or not raw.strip():
        return Unparseable(raw, "empty output")

    try:
        data = _load(strip_code_fence(raw))
    except (yaml.YAMLError, ValueError) as e:
        # PyYAML raises plain ValueError for impossible dates such as 2023-02-30
        return Unparseable(raw, f"not JSON or YAML: {e}")

    if not isinstance(data, dict):
        return Unparseable(raw, f"expected a mapping, got {type(data).__name__}")

    values: dict[str, str | None] = {}
    for key, value in data.items():
        field_name = normalize_key(key)
        if field_name not in _FIELDS:
            continue
        try:
            values[field_name] = _coerce(value)
        except TypeError as e:
            return Unparseable(raw, f"{field_name}: {e}")

    if not values:
        return Unparseable(raw, "no record fields present")

    return Parsed(EquipmentRecord(**values))
