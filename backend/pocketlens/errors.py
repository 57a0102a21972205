"""
PocketLens Error Taxonomy
--------------------------
Fatal failures are exceptions and abort the whole decode.
Row- and field-level problems are Diagnostics: the affected value falls back
to its default and processing continues.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class PocketLensError(Exception):
    """Base class for every failure surfaced to the caller."""


class DecodeError(PocketLensError):
    """The upstream response cannot be decoded at all."""


class MissingBoundary(DecodeError):
    """Content-Type carries no multipart boundary parameter."""


class UnexpectedFormat(DecodeError):
    """The response is not the expected multipart kind."""


class UpstreamError(PocketLensError):
    """The prediction service could not be reached or answered non-2xx."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class Diagnostic:
    dialect: str
    row: int
    message: str

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return f"{self.kind} [{self.dialect} row {self.row}]: {self.message}"


@dataclass(frozen=True)
class RowParseWarning(Diagnostic):
    """Malformed row, bad JSON atom list, unparsable number or residue token."""


@dataclass(frozen=True)
class StructureLookupMiss(Diagnostic):
    """Residue key absent from the structure index; rendered as Unknown_*."""
