"""
Common contract for the pocket table dialects.

Each upstream predictor writes its own CSV grammar. Every dialect parser takes
that CSV text plus the structure index and returns PocketRecords in emitted
order; the position of a record in that list is its pocket number.
"""
from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Optional

from pocketlens.engine.records import DialectResult
from pocketlens.errors import RowParseWarning
from pocketlens.ingestion.structure_index import ResidueIndex

_leading_int = re.compile(r"^\s*([+-]?\d+)")


def parse_pos(value: str) -> Optional[int]:
    """Leading integer of labels like '56', '56A', ' -12B'; None when there is none."""
    m = _leading_int.match(value or "")
    return int(m.group(1)) if m else None


class DialectParser(ABC):
    name: str = "dialect"

    def __init__(self):
        self.logger = logging.getLogger(f"pocketlens.dialects.{self.name}")

    @abstractmethod
    def parse(self, csv_text: Optional[str], index: ResidueIndex) -> DialectResult:
        """Parse one CSV table. Never raises on row-level problems."""

    def warn(self, result: DialectResult, row: int, message: str) -> None:
        result.diagnostics.append(RowParseWarning(self.name, row, message))
        self.logger.warning(f"{self.name} row {row}: {message}")

    def number(self, result: DialectResult, row: int, column: str, raw: Optional[str]) -> float:
        """Float value of a numeric column; 0.0 when missing or invalid."""
        text = (raw or "").strip()
        if not text:
            return 0.0
        try:
            value = float(text)
        except ValueError:
            self.warn(result, row, f"column '{column}' is not a number: {raw!r}")
            return 0.0
        if not math.isfinite(value):
            self.warn(result, row, f"column '{column}' is not finite: {raw!r}")
            return 0.0
        return value

    def center(self, result: DialectResult, row: int, values: dict, columns: tuple[str, str, str]):
        return tuple(self.number(result, row, c, values.get(c)) for c in columns)
