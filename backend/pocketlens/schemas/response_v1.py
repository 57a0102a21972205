"""
PocketLens API v1.0 Response Schema
------------------------------------
Pydantic v2 models enforcing the exact contract of the /api/process response.
Field aliases are the keys the viewer reads.
"""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field


class PocketRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pockets: str = Field(..., alias="Pockets")
    score: float
    pocket_center: str = Field(..., alias="Pocket center", pattern=r"^\(-?\d+\.\d{3}, -?\d+\.\d{3}, -?\d+\.\d{3}\)$")
    residues: str = Field("", alias="Residues")
    atoms: str = Field("", alias="Atoms")


class PocketResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    grasp_data: list[PocketRow] = Field(default_factory=list, alias="graspData")
    p2rank_data: list[PocketRow] = Field(default_factory=list, alias="p2rankData")
    pdb_content: str = Field("", alias="pdbContent")
    grasp_pockets: dict[str, list[int]] = Field(default_factory=dict, alias="graspPockets")
    p2rank_pockets: dict[str, list[int]] = Field(default_factory=dict, alias="p2rankPockets")


class HealthResponse(BaseModel):
    status: str
    version: str


class ExportRequest(BaseModel):
    """Body of /api/export: one pocket table as the viewer holds it."""
    rows: list[PocketRow] = Field(default_factory=list)
    filename: str = Field("pockets.csv", pattern=r"^[\w.-]+\.csv$")
