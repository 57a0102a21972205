import json
import logging
from typing import Optional

import requests

from pocketlens import config
from pocketlens.config import ServiceConstants
from pocketlens.errors import UpstreamError

logger = logging.getLogger("pocketlens.upstream")


def _error_message(res: requests.Response, service: str) -> str:
    """Single readable message for a non-2xx reply from the prediction service."""
    try:
        data = res.json()
    except ValueError:
        reason = res.reason or "Unknown error"
        return f"{service} API request failed: {reason} (Status: {res.status_code})"

    message = None
    if isinstance(data, dict):
        message = data.get("error") or data.get("message") or data.get("detail")
    if not message:
        message = json.dumps(data)
    return f"{service} API error: {message} (Status: {res.status_code})"


class PocketServiceClient:
    """Posts a PDB ID or PDB file to the pocket prediction service. No retries."""

    def __init__(self, url: str = None, timeout: float = None,
                 service: str = ServiceConstants.SERVICE_NAME):
        self.url = url or config.UPSTREAM_URL
        self.timeout = timeout if timeout is not None else config.UPSTREAM_TIMEOUT
        self.service = service

    def submit(self, pdb_id: Optional[str] = None,
               pdb_file: Optional[tuple[str, bytes]] = None) -> tuple[str, bytes]:
        """
        Returns (content_type, body) of the multipart reply.

        Args:
            pdb_id:   4-character PDB identifier, or None.
            pdb_file: (filename, content) of an uploaded structure, or None.
        """
        data = {"pdb_id": pdb_id} if pdb_id else {}
        files = {"pdb_file": (pdb_file[0], pdb_file[1], "chemical/x-pdb")} if pdb_file else None
        source = pdb_id or (pdb_file[0] if pdb_file else "<nothing>")

        logger.info(f"{self.service} request: {source} -> {self.url}")
        try:
            res = requests.post(self.url, data=data, files=files, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{self.service} request failed ({self.url}): {e}")
            raise UpstreamError(f"{self.service} API unreachable: {e}") from e

        if not res.ok:
            message = _error_message(res, self.service)
            logger.warning(message)
            raise UpstreamError(message, status_code=res.status_code)

        content_type = res.headers.get("Content-Type", "")
        logger.info(f"✅ {self.service} reply: {len(res.content)} bytes ({content_type.split(';')[0]})")
        return content_type, res.content
