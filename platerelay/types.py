"""Shared enums."""

from enum import Enum


class RecordFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


class Stage(str, Enum):
    ANNOTATE = "annotate"
    VALIDATE = "validate"
    FORMAT = "format"
