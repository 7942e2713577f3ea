from dataclasses import dataclass
from datetime import datetime


@dataclass
class CabinetDocumentRecord:
    """Represents a row from the cabinet_documents table."""

    path: str
    kind: str
    ocr_status: str
    ocr_text: str | None = None
    page_count: int | None = None
    indexed_at: datetime | None = None
    updated_at: datetime | None = None
