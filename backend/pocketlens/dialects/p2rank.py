"""
P2Rank pocket table (Method B).

    name  ,  rank,   score, probability, ..., center_x, center_y, center_z, residue_ids, surf_atom_ids
    pocket1,    1,  21.40,       0.874, ...,   12.301,   -4.110,   33.002, A_15 A_16,  101 102 103

Header and values are padded with spaces; a value may be double-quoted and
contain commas. Residues are "<chain>_<seq>" tokens resolved to names through
the structure index. Rows missing values are dropped, and pockets are
numbered over the rows actually emitted.
"""
from __future__ import annotations

import re
from typing import Optional

from pocketlens.dialects.base import DialectParser, parse_pos
from pocketlens.engine.records import DialectResult, PocketRecord
from pocketlens.errors import StructureLookupMiss
from pocketlens.ingestion.structure_index import ResidueIndex

# a comma separates fields only when an even number of quotes follows it on the line
_FIELD_SPLIT = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')

NAME_COLUMN = "name"
SCORE_COLUMN = "probability"
CENTER_COLUMNS = ("center_x", "center_y", "center_z")
RESIDUE_COLUMN = "residue_ids"
ATOM_COLUMN = "surf_atom_ids"


def split_fields(line: str) -> list[str]:
    """Split one CSV line on commas outside balanced double-quote runs."""
    return _FIELD_SPLIT.split(line)


def clean_value(raw: str) -> str:
    value = raw.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def pocket_label(name: str, row_no: int) -> str:
    if not name:
        return f"Pocket {row_no}"
    return name.replace("pocket", "Pocket ", 1)


class P2RankParser(DialectParser):
    name = "p2rank"

    def parse(self, csv_text: Optional[str], index: ResidueIndex) -> DialectResult:
        result = DialectResult()
        if not csv_text:
            return result

        lines = [line for line in csv_text.split("\n") if line.strip()]
        if not lines:
            return result

        headers = [h.strip() for h in lines[0].split(",")]
        for line_no, line in enumerate(lines[1:], start=1):
            values = split_fields(line)
            if len(values) < len(headers):
                self.warn(result, line_no,
                          f"dropped: insufficient values ({len(values)} < {len(headers)})")
                continue

            row = {h: clean_value(v) for h, v in zip(headers, values)}
            row_no = len(result.records) + 1
            result.records.append(self._parse_row(result, row_no, row, index))

        misses = sum(1 for d in result.diagnostics if isinstance(d, StructureLookupMiss))
        self.logger.info(f"P2Rank: parsed {len(result.records)} pocket(s), {misses} unresolved residue(s)")
        return result

    def _parse_row(self, result: DialectResult, row_no: int, row: dict,
                   index: ResidueIndex) -> PocketRecord:
        tokens = row.get(RESIDUE_COLUMN, "").split()

        return PocketRecord(
            label=pocket_label(row.get(NAME_COLUMN, ""), row_no),
            score=self.number(result, row_no, SCORE_COLUMN, row.get(SCORE_COLUMN)),
            center=self.center(result, row_no, row, CENTER_COLUMNS),
            residues=tuple(self._residue_name(result, row_no, t, index) for t in tokens),
            atoms=", ".join(row.get(ATOM_COLUMN, "").split()),
            residue_numbers=tuple(self._residue_numbers(result, row_no, tokens)),
        )

    def _residue_numbers(self, result: DialectResult, row_no: int, tokens: list[str]) -> list[int]:
        numbers = []
        for token in tokens:
            _, _, seq = token.partition("_")
            number = parse_pos(seq)
            if number is None:
                self.warn(result, row_no, f"residue token {token!r} has no sequence number")
                continue
            numbers.append(number)
        return numbers

    def _residue_name(self, result: DialectResult, row_no: int, token: str,
                      index: ResidueIndex) -> str:
        res_name = index.get(token)
        if res_name is None:
            result.diagnostics.append(
                StructureLookupMiss(self.name, row_no, f"{token} not in structure")
            )
            self.logger.debug(f"P2Rank row {row_no}: {token} not in structure")
            return f"Unknown_{token}"
        return f"{res_name}{token.split('_')[1]}"
