"""
certificates.py
- Purpose: API routes for reading uploaded training certificates.
- Design: Keep router thin. Delegate business logic to services.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from certintel.api.deps import get_certificate_service
from certintel.schemas.certificate import (
    AutofillResponse,
    ExtractResponse,
    MatchRequest,
    PresearchResponse,
    RecipientResolutionOut,
)
from certintel.services.certificate_service import CertificateService
from certintel.validations.file_validators import read_certificate_upload, validate_certificate_upload

router = APIRouter(prefix="/api/certificates", tags=["Certificates"])


@router.post("/extract", response_model=ExtractResponse)
def extract_certificate(
    certificateFile: UploadFile = File(...),
    svc: CertificateService = Depends(get_certificate_service),
):
    mime_type = validate_certificate_upload(certificateFile)
    content = read_certificate_upload(certificateFile)
    extraction = svc.extract_certificate_fields(content, mime_type)
    return ExtractResponse.from_extraction(extraction)


@router.post("/autofill", response_model=AutofillResponse)
def autofill_certificate(
    certificateFile: UploadFile = File(...),
    selected_person_id: str | None = Form(None),
    svc: CertificateService = Depends(get_certificate_service),
):
    mime_type = validate_certificate_upload(certificateFile)
    content = read_certificate_upload(certificateFile)
    extraction, outcome = svc.autofill(content, mime_type, selected_person_id=selected_person_id)
    base = ExtractResponse.from_extraction(extraction)
    return AutofillResponse(**base.model_dump(), autofill=outcome.to_dict())


@router.post("/presearch", response_model=PresearchResponse)
def presearch_certificate(
    certificateFile: UploadFile = File(...),
    svc: CertificateService = Depends(get_certificate_service),
):
    mime_type = validate_certificate_upload(certificateFile)
    content = read_certificate_upload(certificateFile)
    extraction, resolution = svc.presearch(content, mime_type)
    base = ExtractResponse.from_extraction(extraction)
    return PresearchResponse(**base.model_dump(), recipient=RecipientResolutionOut.from_resolution(resolution))


@router.post("/match", response_model=RecipientResolutionOut)
def match_recipient(body: MatchRequest, svc: CertificateService = Depends(get_certificate_service)):
    return RecipientResolutionOut.from_resolution(svc.resolve_recipient(body.name))
