"""
GrASP pocket table (Method A).

    prob,x,y,z,resid_id,atom_indexes
    0.87,1.0,2.0,3.0,"Residue ALA, 10Residue GLY, 11","[1,2,3]"

Residues are embedded as free text ("Residue <name>, <number>", repeated),
atoms as a JSON array. Every data row becomes a pocket, numbered by its row.
"""
from __future__ import annotations

import csv
import io
import json
import re
from typing import Optional

from pocketlens.dialects.base import DialectParser
from pocketlens.engine.records import DialectResult, PocketRecord
from pocketlens.ingestion.structure_index import ResidueIndex

RESIDUE_PATTERN = re.compile(r"Residue (\w+), (\d+)")

SCORE_COLUMN = "prob"
CENTER_COLUMNS = ("x", "y", "z")
RESIDUE_COLUMN = "resid_id"
ATOM_COLUMN = "atom_indexes"


def extract_residues(text: str) -> list[tuple[str, int]]:
    """Unique (name, number) pairs, first occurrence kept, sorted by number."""
    seen = set()
    residues = []
    for name, number in RESIDUE_PATTERN.findall(text or ""):
        residue = (name, int(number))
        if residue in seen:
            continue
        seen.add(residue)
        residues.append(residue)
    return sorted(residues, key=lambda r: r[1])


class GraspParser(DialectParser):
    name = "grasp"

    def parse(self, csv_text: Optional[str], index: ResidueIndex) -> DialectResult:
        result = DialectResult()
        if not csv_text:
            return result

        reader = csv.DictReader(io.StringIO(csv_text, newline=""))
        try:
            reader.fieldnames
        except csv.Error as e:
            self.warn(result, 0, f"malformed CSV header: {e}")
            return result

        row_no = 0
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                # the reader resets on the next call, so only this row is lost
                row_no += 1
                self.warn(result, row_no, f"malformed CSV row, using defaults: {e}")
                result.records.append(PocketRecord(f"Pocket {row_no}", 0.0, (0.0, 0.0, 0.0)))
                continue
            row_no += 1
            result.records.append(self._parse_row(result, row_no, row))

        self.logger.info(f"GrASP: parsed {len(result.records)} pocket(s)")
        return result

    def _parse_row(self, result: DialectResult, row_no: int, row: dict) -> PocketRecord:
        if None in row:
            self.warn(result, row_no, f"{len(row[None])} value(s) beyond the header ignored")
        if any(v is None for v in row.values()):
            self.warn(result, row_no, "fewer values than header columns; missing fields use defaults")

        residues = extract_residues(row.get(RESIDUE_COLUMN) or "")

        return PocketRecord(
            label=f"Pocket {row_no}",
            score=self.number(result, row_no, SCORE_COLUMN, row.get(SCORE_COLUMN)),
            center=self.center(result, row_no, row, CENTER_COLUMNS),
            residues=tuple(f"{name}{number}" for name, number in residues),
            atoms=self._atoms(result, row_no, row.get(ATOM_COLUMN)),
            residue_numbers=tuple(number for _, number in residues),
        )

    def _atoms(self, result: DialectResult, row_no: int, raw: Optional[str]) -> str:
        if not raw:
            return ""
        try:
            atoms = json.loads(raw)
        except json.JSONDecodeError as e:
            self.warn(result, row_no, f"'{ATOM_COLUMN}' is not valid JSON: {e}")
            return ""
        if not isinstance(atoms, list):
            self.warn(result, row_no, f"'{ATOM_COLUMN}' is not a JSON array: {raw!r}")
            return ""
        return ", ".join(str(a) for a in atoms)
