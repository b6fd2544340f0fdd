# certintel/services/certificate_service.py
"""
certificate_service.py
- Purpose: Orchestrates the certificate intake workflow for the portal:
  extraction under a time budget, recipient lookup, auto-fill reconciliation.
- Owns: choice of execution backend, candidate pools from the directory.
- Design: Thick service; routers remain thin. Collaborators come in as
  protocols so the portal's real stores can be swapped in.
"""

from __future__ import annotations

import base64
import logging
import uuid
from typing import Iterable

from certintel.certificates.fields import ExtractedCertificateFields
from certintel.constants.statuses import ResolutionStatus
from certintel.core import (
    AppError,
    ErrorCode,
    LowConfidenceExtraction,
    ProcessingTimeout,
    UnreadableDocument,
    not_found,
)
from certintel.core.config import settings
from certintel.matching.candidates import MatchCandidate, find_best_match, find_possible_matches
from certintel.matching.names import Person
from certintel.reconcile.autofill import reconcile
from certintel.reconcile.types import ALL_FORM_FIELDS, AutofillContext, ReconciliationOutcome
from certintel.repos.class_catalog.read import ClassCatalogLookup
from certintel.repos.directory.read import DirectoryLookup
from certintel.services.types import CertificateExtraction, RecipientResolution
from certintel.workers.extract_certificate import run_with_timeout

logger = logging.getLogger("certintel.certificate_service")

DIRECTORY_SEARCH_LIMIT = 25

_TYPED_ERRORS: dict[str, type[AppError]] = {
    ErrorCode.UNREADABLE_DOCUMENT.value: UnreadableDocument,
    ErrorCode.LOW_CONFIDENCE_EXTRACTION.value: LowConfidenceExtraction,
    ErrorCode.PROCESSING_TIMEOUT.value: ProcessingTimeout,
}


def app_error_from_payload(err: dict) -> AppError:
    """Rebuild an AppError returned by the Celery task."""
    code = str(err.get("code") or ErrorCode.UNKNOWN.value)
    typed = _TYPED_ERRORS.get(code)
    if typed is not None:
        return typed(err.get("message"), details=err.get("details"))
    try:
        error_code = ErrorCode(code)
    except ValueError:
        error_code = ErrorCode.UNKNOWN
    return AppError(
        code=error_code,
        reason=err.get("reason") or "",
        status_code=int(err.get("status_code") or 500),
        details=err.get("details"),
        message=err.get("message"),
    )


class CertificateService:
    def __init__(
        self,
        directory: DirectoryLookup,
        catalog: ClassCatalogLookup,
        *,
        timeout_seconds: float | None = None,
        backend: str | None = None,
    ):
        self.directory = directory
        self.catalog = catalog
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.EXTRACTION_TIMEOUT_SECONDS
        self.backend = (backend or settings.EXTRACTION_BACKEND or "thread").strip().lower()

    # ---------------------------------------------------------------------
    # Extraction
    # ---------------------------------------------------------------------

    def extract_certificate_fields(self, file_bytes: bytes, mime_type: str) -> CertificateExtraction:
        trace_id = str(uuid.uuid4())
        if self.backend == "celery":
            return self._extract_via_celery(file_bytes, mime_type, trace_id=trace_id)
        return run_with_timeout(file_bytes, mime_type, timeout_seconds=self.timeout_seconds, trace_id=trace_id)

    def _extract_via_celery(self, file_bytes: bytes, mime_type: str, *, trace_id: str) -> CertificateExtraction:
        from celery.exceptions import TimeoutError as CeleryTimeoutError

        from certintel.tasks.certificate_pipeline import extract_certificate_task

        payload_b64 = base64.b64encode(file_bytes or b"").decode("ascii")
        async_result = extract_certificate_task.delay(payload_b64, mime_type, trace_id)
        logger.info("certificate.extract.enqueued", extra={"celery_task_id": async_result.id, "trace_id": trace_id})

        try:
            out = async_result.get(timeout=self.timeout_seconds)
        except CeleryTimeoutError as e:
            async_result.revoke()
            logger.warning("certificate.extract.timeout", extra={"timeout_seconds": self.timeout_seconds})
            raise ProcessingTimeout(details={"timeout_seconds": self.timeout_seconds}) from e

        if not out.get("ok"):
            raise app_error_from_payload(out.get("error") or {})
        return CertificateExtraction.from_dict(out["result"])

    # ---------------------------------------------------------------------
    # Recipient lookup
    # ---------------------------------------------------------------------

    def _candidate_pool(self, name: str | None) -> list[Person]:
        if not name or not name.strip():
            return []
        return list(self.directory.search(name, limit=DIRECTORY_SEARCH_LIMIT))

    def match_recipient(self, name: str | None) -> Person | None:
        best = find_best_match(name, self._candidate_pool(name))
        return best.person if best else None

    def rank_possible_recipients(self, name: str | None) -> list[MatchCandidate]:
        return find_possible_matches(name, self._candidate_pool(name))

    def resolve_recipient(self, name: str | None) -> RecipientResolution:
        """
        Strict match first; otherwise a short candidate list for a human to
        pick from. Ambiguous results are never resolved automatically.
        """
        if not name or not name.strip():
            resolution = RecipientResolution(
                status=ResolutionStatus.NOT_FOUND,
                query=None,
                message="Could not identify the recipient on this certificate.",
            )
            logger.info("recipient.resolved", extra={"status": resolution.status.value})
            return resolution

        pool = self._candidate_pool(name)
        best = find_best_match(name, pool)
        possible = find_possible_matches(name, pool)

        if best is not None:
            resolution = RecipientResolution(
                status=ResolutionStatus.MATCHED,
                query=name,
                message=f"Found: {best.person.display_name or name}.",
                match=best,
                candidates=possible,
            )
        elif possible:
            resolution = RecipientResolution(
                status=ResolutionStatus.AMBIGUOUS,
                query=name,
                message=f'Several users could match "{name}". Please choose one.',
                candidates=possible,
            )
        else:
            resolution = RecipientResolution(
                status=ResolutionStatus.NOT_FOUND,
                query=name,
                message=f'No matching user found for "{name}".',
            )

        logger.info(
            "recipient.resolved",
            extra={
                "status": resolution.status.value,
                "pool_size": len(pool),
                "candidate_count": len(resolution.candidates),
                "score": best.score if best else None,
            },
        )
        return resolution

    # ---------------------------------------------------------------------
    # Auto-fill
    # ---------------------------------------------------------------------

    def reconcile_autofill(
        self,
        fields: ExtractedCertificateFields | None,
        selected_person: Person | None = None,
        form_fields: Iterable[str] = ALL_FORM_FIELDS,
        *,
        selected_display_name: str | None = None,
    ) -> ReconciliationOutcome:
        context = AutofillContext(
            class_catalog=tuple(self.catalog.list_active()),
            selected_person=selected_person,
            selected_display_name=selected_display_name,
            form_fields=frozenset(form_fields),
        )
        return reconcile(fields, context)

    def autofill(
        self,
        file_bytes: bytes,
        mime_type: str,
        *,
        selected_person_id: str | None = None,
        form_fields: Iterable[str] = ALL_FORM_FIELDS,
    ) -> tuple[CertificateExtraction, ReconciliationOutcome]:
        selected = None
        if selected_person_id:
            selected = self.directory.get_by_id(selected_person_id)
            if selected is None:
                raise not_found(message="Selected user was not found.", details={"selected_person_id": selected_person_id})

        extraction = self.extract_certificate_fields(file_bytes, mime_type)
        outcome = self.reconcile_autofill(extraction.fields, selected, form_fields)
        return extraction, outcome

    def presearch(self, file_bytes: bytes, mime_type: str) -> tuple[CertificateExtraction, RecipientResolution]:
        extraction = self.extract_certificate_fields(file_bytes, mime_type)
        return extraction, self.resolve_recipient(extraction.fields.recipient_name)
