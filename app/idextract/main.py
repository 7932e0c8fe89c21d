from __future__ import annotations

import logging
from typing import Dict, Optional

import anyio
from fastapi import FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from PIL import UnidentifiedImageError

from .config import CONFIG
from .pipeline.errors import ExtractionError, OCRError
from .pipeline.extract import extract_document_fields, failure_payload
from .pipeline.ocr import load_image, ocr_image_text
from .pipeline.trace import ExtractionTrace
from .schemas import DocumentType, ErrorResponse, ExtractRequest, ExtractResponse

logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
LOGGER = logging.getLogger("idextract")

app = FastAPI(title="ID Extractor")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


def _trace_for(requested: Optional[bool]) -> ExtractionTrace:
    enabled = CONFIG.extraction.trace if requested is None else requested
    return ExtractionTrace(enabled=enabled)


def _run_extraction(raw_text: str, document_type: DocumentType, trace: ExtractionTrace) -> JSONResponse:
    LOGGER.info("Extracting %s document (%d characters)", document_type.value, len(raw_text))
    try:
        result = extract_document_fields(raw_text, document_type, trace=trace)
    except ExtractionError as exc:
        LOGGER.info("Extraction failed: %s", exc.code)
        body = ErrorResponse(error=failure_payload(exc), trace=trace.to_list())
        return JSONResponse(body.model_dump(mode="json"), status_code=422)
    body = ExtractResponse(result=result, trace=trace.to_list())
    return JSONResponse(body.model_dump(mode="json"))


@app.post("/extract")
async def extract(payload: ExtractRequest):
    return _run_extraction(payload.raw_text, payload.document_type, _trace_for(payload.trace))


@app.post("/extract_image")
async def extract_image(
    file: UploadFile = File(...),
    document_type: DocumentType = Form(DocumentType.PASSPORT),
    trace: Optional[bool] = Form(None),
):
    data = await file.read()
    try:
        image = load_image(data)
    except UnidentifiedImageError:
        return JSONResponse({"error": f"Unsupported or unreadable image: {file.filename}"}, status_code=400)
    try:
        raw_text = await anyio.to_thread.run_sync(ocr_image_text, image)
    except OCRError as exc:
        LOGGER.warning("OCR failed for %s: %s", file.filename, exc)
        return JSONResponse({"error": f"OCR extraction failed: {exc}"}, status_code=502)
    return _run_extraction(raw_text, document_type, _trace_for(trace))
