from abc import ABC, abstractmethod
from pathlib import Path

from doccore.ingestion.models import ExtractionResult


class BaseTextExtractor(ABC):
    """Contract for per-kind cabinet text extractors."""

    @abstractmethod
    def extract(self, path: Path) -> ExtractionResult:
        """Extract text from the file at ``path`` (absolute).

        Raises:
            IngestionError or any backend error; the job runner records the
            document as failed.
        """


def truncate(text: str, limit: int) -> str:
    return text[:limit] if len(text) > limit else text
