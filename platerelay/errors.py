"""Relay error taxonomy. Every pipeline failure is one of these."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for failures that abort a relay request."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InputError(RelayError):
    """A stage received missing or empty input (empty image buffer, empty OCR text)."""


class NoTextFoundError(RelayError):
    """OCR succeeded but the image contains no readable text."""


class ContentRejected(RelayError):
    """The image labels carry no equipment evidence."""


class UpstreamError(RelayError):
    """The OCR or language-model provider failed, or did not answer in time."""

    def __init__(self, message: str = "", provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider
