from pathlib import Path

from doccore.ingestion.extractors.base import BaseTextExtractor, truncate
from doccore.ingestion.models import ExtractionResult
from doccore.logging.logger import Log
from doccore.office.base import BaseDocxConverter


class DocxTextExtractor(BaseTextExtractor):
    def __init__(self, converter: BaseDocxConverter, max_chars: int = 100_000) -> None:
        self._converter = converter
        self._max_chars = max_chars

    def extract(self, path: Path) -> ExtractionResult:
        conversion = self._converter.convert(path)
        for warning in conversion.warnings:
            Log.warning(f"DOCX conversion of {path}: {warning}")
        return ExtractionResult(text=truncate(conversion.text.strip(), self._max_chars))
