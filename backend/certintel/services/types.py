"""certintel/services/types.py

Results handed back to the portal by CertificateService.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from certintel.certificates.fields import ExtractedCertificateFields
from certintel.certificates.quality import QualityReport
from certintel.constants.statuses import ConfidenceLevel, ResolutionStatus
from certintel.documents.types import AcquiredText
from certintel.matching.candidates import MatchCandidate


@dataclass(frozen=True)
class CertificateExtraction:
    fields: ExtractedCertificateFields
    raw_text: str
    acquired: AcquiredText
    quality: QualityReport

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form (used as the Celery task result)."""
        return {
            "fields": self.fields.to_dict(),
            "raw_text": self.raw_text,
            "acquired": asdict(self.acquired),
            "quality": self.quality.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CertificateExtraction":
        quality = dict(data["quality"])
        quality["level"] = ConfidenceLevel(quality["level"])
        return cls(
            fields=ExtractedCertificateFields.from_dict(data["fields"]),
            raw_text=data["raw_text"],
            acquired=AcquiredText(**data["acquired"]),
            quality=QualityReport(**quality),
        )


@dataclass(frozen=True)
class RecipientResolution:
    status: ResolutionStatus
    query: str | None
    message: str
    match: MatchCandidate | None = None
    candidates: list[MatchCandidate] = field(default_factory=list)
