from abc import ABC, abstractmethod

from doccore.ingestion.models import CabinetDocument, DocumentKind, OcrStatus


class BaseDocumentIndex(ABC):
    """Contract for the store that persists cabinet documents and OCR status."""

    @abstractmethod
    def update_ocr_status(
        self,
        path: str,
        status: OcrStatus,
        text: str | None,
        page_count: int | None = None,
    ) -> None:
        """Record the status (and, when done, the text) for ``path``."""

    @abstractmethod
    def find_pending(self) -> list[CabinetDocument]:
        """Return documents whose OCR status is still ``pending``."""

    @abstractmethod
    def index_document(self, path: str, kind: DocumentKind) -> None:
        """Insert ``path`` as pending, or reset an existing row to pending."""

    @abstractmethod
    def remove_document(self, path: str) -> None:
        """Forget ``path``."""
