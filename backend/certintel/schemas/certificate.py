"""
certificate.py (schemas)
- Purpose: Request/response DTOs for the certificate endpoints.
- Design: Keep API DTOs stable; include helper constructors for DRY mapping.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from certintel.matching.candidates import MatchCandidate
from certintel.services.types import CertificateExtraction, RecipientResolution


class ExtractedFieldsOut(BaseModel):
    recipientName: Optional[str] = None
    trainingClassName: Optional[str] = None
    hoursLogged: Optional[float] = None
    courseIdentifier: Optional[str] = None
    logNumber: Optional[str] = None
    courseDate: Optional[datetime] = None
    courseDateText: Optional[str] = None
    isLikelyKnownTemplate: bool = False


class QualityOut(BaseModel):
    confidence: float
    level: Literal["high", "medium", "low"]
    strategy: str
    usedOcr: bool
    notes: list[str] = Field(default_factory=list)


class ExtractResponse(BaseModel):
    """Mirrors the portal's original extraction endpoint."""

    success: bool = True
    text: str
    extracted: ExtractedFieldsOut
    quality: QualityOut

    @classmethod
    def from_extraction(cls, extraction: CertificateExtraction) -> "ExtractResponse":
        f = extraction.fields
        return cls(
            text=extraction.raw_text,
            extracted=ExtractedFieldsOut(
                recipientName=f.recipient_name,
                trainingClassName=f.training_class_name,
                hoursLogged=f.hours_logged,
                courseIdentifier=f.course_identifier,
                logNumber=f.log_number,
                courseDate=f.course_date,
                courseDateText=f.course_date_text,
                isLikelyKnownTemplate=f.is_likely_known_template,
            ),
            quality=QualityOut(
                confidence=extraction.quality.confidence,
                level=extraction.quality.level.value,
                strategy=extraction.acquired.strategy,
                usedOcr=extraction.acquired.used_ocr,
                notes=list(extraction.quality.notes),
            ),
        )


class CandidateOut(BaseModel):
    id: str
    displayName: str
    email: Optional[str] = None
    score: int

    @classmethod
    def from_candidate(cls, c: MatchCandidate) -> "CandidateOut":
        return cls(id=c.person.id, displayName=c.person.display_name, email=c.person.email, score=c.score)


class RecipientResolutionOut(BaseModel):
    status: Literal["matched", "ambiguous", "not_found"]
    query: Optional[str] = None
    message: str
    match: Optional[CandidateOut] = None
    candidates: list[CandidateOut] = Field(default_factory=list)

    @classmethod
    def from_resolution(cls, r: RecipientResolution) -> "RecipientResolutionOut":
        return cls(
            status=r.status.value,
            query=r.query,
            message=r.message,
            match=CandidateOut.from_candidate(r.match) if r.match else None,
            candidates=[CandidateOut.from_candidate(c) for c in r.candidates],
        )


class MatchRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class AutofillResponse(ExtractResponse):
    autofill: dict[str, Any]


class PresearchResponse(ExtractResponse):
    recipient: RecipientResolutionOut
