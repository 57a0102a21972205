"""
PocketLens service configuration.
Read once from the environment at import time. The decode core never reads
these values; they are passed into it explicitly by the service layer.
"""
import os
from typing import Final

UPSTREAM_URL = os.getenv("POCKETLENS_UPSTREAM_URL", "http://grasp:8000/process/")
UPSTREAM_TIMEOUT = float(os.getenv("POCKETLENS_UPSTREAM_TIMEOUT", "300"))
UPLOAD_LIMIT_BYTES = int(os.getenv("POCKETLENS_UPLOAD_LIMIT_MB", "25")) * 1024 * 1024
CORS_ORIGINS = [o.strip() for o in os.getenv("POCKETLENS_CORS_ORIGINS", "*").split(",") if o.strip()]


class ServiceConstants:
    VERSION: Final = "1.0.0"
    SERVICE_NAME: Final = "GRaSP"
    EXPECTED_MEDIA_TYPE: Final = "multipart/form-data"
    GRASP_MARKER: Final = "grasp.csv"
    P2RANK_MARKER: Final = "p2rank.csv"
    STRUCTURE_MARKER: Final = "protein.pdb"
