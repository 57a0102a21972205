"""
Multipart Part Splitter
------------------------
Splits the prediction service's multipart/form-data reply into its named
parts. Parts are recognised by a filename substring in their headers, so the
order they arrive in does not matter and unknown parts are ignored.

It has ZERO knowledge of HTTP clients or FastAPI.
It takes a content type and a body in and returns text parts out.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from pocketlens.config import ServiceConstants
from pocketlens.errors import MissingBoundary, UnexpectedFormat

logger = logging.getLogger("pocketlens.multipart")

HEADER_SEPARATOR = "\r\n\r\n"
LINE_BREAK = "\r\n"

_BOUNDARY_RE = re.compile(r'boundary=("?)([^";]*)\1', re.IGNORECASE)


@dataclass(frozen=True)
class PartMarkers:
    """Filename substrings identifying each part of the reply."""
    grasp: str = ServiceConstants.GRASP_MARKER
    p2rank: str = ServiceConstants.P2RANK_MARKER
    structure: str = ServiceConstants.STRUCTURE_MARKER

    def roles(self) -> list[tuple[str, str]]:
        return [("grasp", self.grasp), ("p2rank", self.p2rank), ("structure", self.structure)]


@dataclass(frozen=True)
class Part:
    headers: str
    payload: str


def _as_text(body: Union[bytes, bytearray, str]) -> str:
    if isinstance(body, str):
        return body
    return bytes(body).decode("utf-8", errors="replace")


def ensure_multipart(content_type: Optional[str],
                     expected: str = ServiceConstants.EXPECTED_MEDIA_TYPE) -> None:
    """Raise UnexpectedFormat unless the content type is the expected multipart kind."""
    if not content_type or expected.lower() not in content_type.lower():
        raise UnexpectedFormat(
            f"Unexpected response format: expected {expected}, got {content_type or 'no content type'}"
        )


def parse_boundary(content_type: Optional[str]) -> str:
    """
    Extract the boundary parameter from a Content-Type header.

        multipart/form-data; boundary="abc123"  ->  abc123
    """
    match = _BOUNDARY_RE.search(content_type or "")
    if not match or not match.group(2).strip():
        raise MissingBoundary("No boundary found in response.")
    return match.group(2).strip()


def split_parts(body: Union[bytes, str], boundary: str) -> list[Part]:
    """
    Return every non-blank part between boundary markers.

    The preamble before the first marker and the closing marker (the one
    followed by "--") are excluded. A part without a blank line between its
    headers and its payload is skipped.
    """
    text = _as_text(body)
    delimiter = f"--{boundary}"
    segments = text.split(delimiter)

    parts = []
    # segments[0] is the preamble
    for segment in segments[1:]:
        if segment.startswith("--"):
            break
        if not segment.strip():
            continue

        head, sep, payload = segment.partition(HEADER_SEPARATOR)
        if not sep:
            logger.warning(f"Skipping multipart segment without a header separator ({len(segment)} chars)")
            continue

        # the CRLF before the next delimiter belongs to the delimiter
        if payload.endswith(LINE_BREAK):
            payload = payload[: -len(LINE_BREAK)]
        parts.append(Part(headers=head.strip(), payload=payload))

    return parts


def identify_parts(parts: list[Part], markers: PartMarkers) -> dict[str, Optional[str]]:
    """Map each known role to its payload, or None when the reply has no such part."""
    found: dict[str, Optional[str]] = {role: None for role, _ in markers.roles()}
    for part in parts:
        for role, marker in markers.roles():
            if marker in part.headers:
                if found[role] is not None:
                    logger.warning(f"Duplicate '{marker}' part in reply; keeping the last one")
                found[role] = part.payload
                break
        else:
            logger.info(f"Ignoring unrecognised multipart part: {part.headers.splitlines()[0] if part.headers else '<no headers>'}")
    return found
