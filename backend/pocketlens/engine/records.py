from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pocketlens.errors import Diagnostic


@dataclass(frozen=True)
class PocketRecord:
    """One predicted pocket, in the shape shared by both dialects."""
    label: str
    score: float
    center: tuple[float, float, float]
    residues: tuple[str, ...] = ()
    atoms: str = ""
    residue_numbers: tuple[int, ...] = ()

    @property
    def center_text(self) -> str:
        x, y, z = self.center
        return f"({x:.3f}, {y:.3f}, {z:.3f})"

    def to_wire(self) -> dict:
        """Row as the viewer and the CSV export see it. Key order is part of the contract."""
        return {
            "Pockets": self.label,
            "score": self.score,
            "Pocket center": self.center_text,
            "Residues": ", ".join(self.residues),
            "Atoms": self.atoms,
        }


def pocket_map(records: list[PocketRecord]) -> dict[str, list[int]]:
    """Renderer contract: {"pocket1": [...], "pocket2": [...]} in record order."""
    return {f"pocket{i}": list(r.residue_numbers) for i, r in enumerate(records, start=1)}


@dataclass
class DialectResult:
    records: list[PocketRecord] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class DecodedResponse:
    """Everything one decode produced. Owned by the caller once returned."""
    grasp: list[PocketRecord] = field(default_factory=list)
    p2rank: list[PocketRecord] = field(default_factory=list)
    structure_text: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def grasp_pockets(self) -> dict[str, list[int]]:
        return pocket_map(self.grasp)

    @property
    def p2rank_pockets(self) -> dict[str, list[int]]:
        return pocket_map(self.p2rank)

    def diagnostics_of(self, kind: Optional[type] = None) -> list[Diagnostic]:
        if kind is None:
            return list(self.diagnostics)
        return [d for d in self.diagnostics if isinstance(d, kind)]

    def to_dict(self) -> dict:
        return {
            "graspData": [r.to_wire() for r in self.grasp],
            "p2rankData": [r.to_wire() for r in self.p2rank],
            "pdbContent": self.structure_text,
            "graspPockets": self.grasp_pockets,
            "p2rankPockets": self.p2rank_pockets,
        }
