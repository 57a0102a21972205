import sys, logging, asyncio
from pathlib import Path
from functools import partial
from typing import Optional
from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.responses import StreamingResponse
from fastapi.middleware.cors import CORSMiddleware

sys.path.insert(0, str(Path(__file__).resolve().parent))

from pocketlens import config
from pocketlens.config import ServiceConstants
from pocketlens.engine.normalizer import decode_response
from pocketlens.errors import PocketLensError, RowParseWarning, StructureLookupMiss
from pocketlens.export.csv_export import records_to_csv
from pocketlens.schemas.response_v1 import ExportRequest, PocketResponse, HealthResponse
from pocketlens.security.validation import validate_inputs, validate_upload, enforce_size_limit
from pocketlens.upstream.client import PocketServiceClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("pocketlens.api")

app = FastAPI(title="PocketLens", version=ServiceConstants.VERSION)
app.add_middleware(CORSMiddleware, allow_origins=config.CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"])


def _predict_sync(pdb_id: Optional[str], pdb_file: Optional[tuple]) -> dict:
    """Blocking part of a request: upstream call, then decode."""
    content_type, body = PocketServiceClient().submit(pdb_id=pdb_id, pdb_file=pdb_file)
    decoded = decode_response(content_type, body)
    warnings = decoded.diagnostics_of(RowParseWarning)
    misses = decoded.diagnostics_of(StructureLookupMiss)
    if warnings or misses:
        logger.info(f"Decode issues: {len(warnings)} row warning(s), {len(misses)} unresolved residue(s)")
    return decoded.to_dict()


@app.post("/api/process", response_model=PocketResponse)
async def process(pdb_id: Optional[str] = Form(None), pdb_file: Optional[UploadFile] = File(None)):
    validate_inputs(pdb_id, pdb_file)

    upload = None
    if pdb_file is not None and pdb_file.filename:
        validate_upload(pdb_file)
        content = await pdb_file.read()
        await enforce_size_limit(content)
        upload = (pdb_file.filename, content)
        pdb_id = None
    else:
        pdb_id = pdb_id.strip()

    try:
        return await asyncio.get_event_loop().run_in_executor(None, partial(_predict_sync, pdb_id, upload))
    except PocketLensError as e:
        logger.error(f"Prediction failed for {pdb_id or upload[0]}: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@app.post("/api/export")
def export_csv(req: ExportRequest):
    """Serve one pocket table as a CSV download."""
    text = records_to_csv([row.model_dump(by_alias=True) for row in req.rows])
    return StreamingResponse(
        iter([text]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={req.filename}"},
    )


@app.get("/health", response_model=HealthResponse)
def health(): return {"status": "operational", "version": ServiceConstants.VERSION}
