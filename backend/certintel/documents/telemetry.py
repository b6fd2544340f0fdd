# certintel/documents/telemetry.py

import logging
import time
from dataclasses import dataclass

logger = logging.getLogger("certintel.extraction")

@dataclass
class ExtractionCallLog:
    trace_id: str
    mime_type: str
    strategy: str
    byte_count: int
    char_count: int
    used_ocr: bool
    latency_ms: int
    ok: bool
    error_type: str | None = None

def now_ms() -> int:
    return int(time.time() * 1000)

def log_extraction_call(item: ExtractionCallLog) -> None:
    logger.info(
        "text_extraction trace_id=%s mime=%s strategy=%s bytes=%s chars=%s ocr=%s latency_ms=%s ok=%s error=%s",
        item.trace_id,
        item.mime_type,
        item.strategy,
        item.byte_count,
        item.char_count,
        item.used_ocr,
        item.latency_ms,
        item.ok,
        item.error_type,
    )
