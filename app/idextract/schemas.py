from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DocumentType(str, Enum):
    """Declared type of the scanned document. Logged; extraction is type-agnostic."""

    PASSPORT = "passport"
    NATIONAL_ID = "national_id"
    DRIVER_LICENSE = "driver_license"


class ExtractedFields(BaseModel):
    birthdate: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    document_number: str
    document_type: DocumentType
    full_name: Optional[str] = None
    country: Optional[str] = None
    raw_text: str = ""


class RejectedCandidateModel(BaseModel):
    text: str
    reason: str
    parsed: Optional[str] = None


class ExtractionFailure(BaseModel):
    code: str
    message: str
    rejected_candidates: List[RejectedCandidateModel] = Field(default_factory=list)
    near_misses: List[str] = Field(default_factory=list)


class ExtractRequest(BaseModel):
    raw_text: str
    document_type: DocumentType = DocumentType.PASSPORT
    trace: Optional[bool] = None


class ExtractResponse(BaseModel):
    result: ExtractedFields
    trace: List[Dict[str, Any]] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: ExtractionFailure
    trace: List[Dict[str, Any]] = Field(default_factory=list)
