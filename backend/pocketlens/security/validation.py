"""
PocketLens request validation.
Rejects bad submissions before the prediction service is called.
"""
import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

from pocketlens import config

logger = logging.getLogger("pocketlens.security")

ALLOWED_EXTENSIONS = {".pdb", ".ent"}


def validate_inputs(pdb_id: Optional[str], file: Optional[UploadFile]) -> None:
    """Exactly one of a PDB ID or a PDB file must be supplied."""
    has_id = bool(pdb_id and pdb_id.strip())
    has_file = file is not None and bool(file.filename)
    if not has_id and not has_file:
        raise HTTPException(status_code=400, detail="Please provide either a PDB ID or upload a PDB file.")
    if has_id and has_file:
        raise HTTPException(
            status_code=400,
            detail="Please provide only one: either a PDB ID or a PDB file, not both.",
        )


def validate_upload(file: UploadFile) -> None:
    """Validate file extension before processing."""
    if file is None:
        return
    name = (file.filename or "").lower()
    ext = "." + name.rsplit(".", 1)[-1] if "." in name else ""
    if ext not in ALLOWED_EXTENSIONS:
        logger.warning(f"Rejected upload with extension {ext!r}")
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {ext}. Allowed: {sorted(ALLOWED_EXTENSIONS)}",
        )


async def enforce_size_limit(content: bytes) -> bytes:
    """Reject empty or oversized uploads."""
    if not content:
        raise HTTPException(status_code=400, detail="Empty file uploaded")
    if len(content) > config.UPLOAD_LIMIT_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {config.UPLOAD_LIMIT_BYTES // (1024*1024)}MB limit ({len(content)} bytes received)",
        )
    return content
