from dataclasses import dataclass
from enum import Enum


class DocumentKind(Enum):
    PDF = "pdf"
    IMAGE = "image"
    DOCX = "docx"
    TEXT = "txt"
    UNSUPPORTED = "unsupported"


class OcrStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class CabinetDocument:
    """A cabinet file as known to the document index."""

    path: str
    kind: DocumentKind
    ocr_status: OcrStatus = OcrStatus.PENDING


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    page_count: int | None = None


@dataclass(frozen=True)
class Capabilities:
    """Optional extraction backends found at startup."""

    ocr: bool
    docx: bool
