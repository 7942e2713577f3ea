from pathlib import Path

from doccore.ingestion.extractors.base import BaseTextExtractor, truncate
from doccore.ingestion.models import ExtractionResult


class PlainTextExtractor(BaseTextExtractor):
    def __init__(self, max_chars: int = 100_000) -> None:
        self._max_chars = max_chars

    def extract(self, path: Path) -> ExtractionResult:
        text = path.read_text(encoding="utf-8", errors="replace")
        return ExtractionResult(text=truncate(text, self._max_chars))
