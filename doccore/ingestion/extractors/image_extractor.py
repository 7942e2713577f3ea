from pathlib import Path

from doccore.ingestion.extractors.base import BaseTextExtractor
from doccore.ingestion.models import ExtractionResult
from doccore.ocr.base import BaseOcrEngine


class ImageTextExtractor(BaseTextExtractor):
    """OCRs image files directly."""

    def __init__(self, ocr_engine: BaseOcrEngine, ocr_language: str = "eng") -> None:
        self._ocr_engine = ocr_engine
        self._ocr_language = ocr_language

    def extract(self, path: Path) -> ExtractionResult:
        return ExtractionResult(text=self._ocr_engine.recognize(path, self._ocr_language).strip())
