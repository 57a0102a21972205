"""
Pocket Record Normalizer
-------------------------
Decodes one prediction-service reply into a DecodedResponse:

  multipart body -> {grasp.csv, p2rank.csv, protein.pdb}
                 -> ResidueIndex (built once from protein.pdb)
                 -> GrASP records + P2Rank records

Only boundary/format failures raise. A reply without pocket tables is a valid
result with empty lists. Nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from pocketlens.dialects.grasp import GraspParser
from pocketlens.dialects.p2rank import P2RankParser
from pocketlens.engine.records import DecodedResponse
from pocketlens.ingestion.multipart import (
    PartMarkers,
    ensure_multipart,
    identify_parts,
    parse_boundary,
    split_parts,
)
from pocketlens.ingestion.structure_index import ResidueIndex

logger = logging.getLogger("pocketlens.normalizer")


def decode_parts(
    grasp_csv: Optional[str],
    p2rank_csv: Optional[str],
    structure_text: Optional[str],
) -> DecodedResponse:
    """Parse already-split parts. Missing parts are treated as empty."""
    structure_text = structure_text or ""
    index = ResidueIndex.from_text(structure_text)

    grasp = GraspParser().parse(grasp_csv, index)
    p2rank = P2RankParser().parse(p2rank_csv, index)

    return DecodedResponse(
        grasp=grasp.records,
        p2rank=p2rank.records,
        structure_text=structure_text,
        diagnostics=grasp.diagnostics + p2rank.diagnostics,
    )


def decode_response(
    content_type: Optional[str],
    body: Union[bytes, str],
    markers: PartMarkers = PartMarkers(),
) -> DecodedResponse:
    """
    Decode a multipart reply from the prediction service.

    Args:
        content_type: The reply's Content-Type header (carries the boundary).
        body:         Raw reply body, bytes or text.
        markers:      Filename substrings identifying each part.

    Raises:
        UnexpectedFormat: content type is not multipart/form-data.
        MissingBoundary:  content type has no boundary parameter.
    """
    ensure_multipart(content_type)
    boundary = parse_boundary(content_type)

    found = identify_parts(split_parts(body, boundary), markers)
    if found["structure"] is None:
        logger.warning("Reply has no structure part; P2Rank residues will be unresolved")

    decoded = decode_parts(found["grasp"], found["p2rank"], found["structure"])

    logger.info(
        f"Decoded reply: {len(decoded.grasp)} GrASP pocket(s), "
        f"{len(decoded.p2rank)} P2Rank pocket(s), "
        f"{len(decoded.diagnostics)} diagnostic(s)"
    )
    return decoded
