"""Test parsing model output into equipment records."""

import pytest

from platerelay.records import Parsed, Unparseable, normalize_key, parse_record, strip_code_fence
from stubs import RECORD_JSON


def test_json_record():
    result = parse_record(RECORD_JSON)
    assert isinstance(result, Parsed)
    assert result.record.device_type == "heat recovery unit"
    assert result.record.brand == "RECAIR"
    assert result.record.contact_phone is None


def test_missing_fields_are_null():
    result = parse_record('{"name": "TK1"}')
    assert isinstance(result, Parsed)
    assert result.record.model_dump() == {
        "device_type": None,
        "name": "TK1",
        "color": None,
        "brand": None,
        "last_maintenance_date": None,
        "contact_phone": None,
        "contact_website": None,
        "manufacturer": None,
    }


def test_yaml_record_with_date_and_number():
    raw = "Device Type: pump\nlast-maintenance-date: 2023-05-01\ncontact_phone: 3581234567\n"
    result = parse_record(raw)
    assert isinstance(result, Parsed)
    assert result.record.device_type == "pump"
    assert result.record.last_maintenance_date == "2023-05-01"
    assert result.record.contact_phone == "3581234567"


def test_fenced_output_is_accepted():
    raw = "```json\n" + RECORD_JSON + "\n```"
    assert strip_code_fence(raw) == RECORD_JSON
    assert isinstance(parse_record(raw), Parsed)


def test_unknown_keys_are_ignored():
    result = parse_record('{"name": "TK1", "serial": "0042"}')
    assert isinstance(result, Parsed)
    assert "serial" not in result.record.model_dump()


@pytest.mark.parametrize("raw", [
    "",
    "   ",
    "just a sentence",
    "[1, 2, 3]",
    '{"serial": "0042"}',
    '{"name": {"first": "TK"}}',
    "name: [unclosed",
])
def test_unparseable(raw):
    result = parse_record(raw)
    assert isinstance(result, Unparseable)
    assert result.raw == raw
    assert result.reason


@pytest.mark.parametrize("key,expected", [
    ("device type", "device_type"),
    ("Device-Type", "device_type"),
    ("  contact   website ", "contact_website"),
    ("manufacturer", "manufacturer"),
])
def test_normalize_key(key, expected):
    assert normalize_key(key) == expected


@pytest.mark.parametrize("raw", [
    "name: TK1\nlast maintenance date: 2023-02-30\n",
    "name: TK1\nlast maintenance date: 2023-13-01\n",
])
def test_impossible_date_is_unparseable(raw):
    result = parse_record(raw)
    assert isinstance(result, Unparseable)
    assert result.reason.startswith("not JSON or YAML")
