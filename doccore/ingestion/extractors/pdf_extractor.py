from pathlib import Path

from doccore.ingestion.extractors.base import BaseTextExtractor
from doccore.ingestion.models import ExtractionResult
from doccore.logging.logger import Log
from doccore.ocr.base import BaseOcrEngine
from doccore.pdf.document_service import PdfDocumentService
from doccore.pdf.rasterizer import PdfRasterizer


class PdfTextExtractor(BaseTextExtractor):
    """Direct content-stream extraction with an OCR fallback for scans.

    When the direct text is shorter than ``min_text_length`` the first pages
    are rendered and OCRed; whichever result is longer is kept.
    """

    def __init__(
        self,
        pdf_service: PdfDocumentService,
        ocr_engine: BaseOcrEngine | None,
        rasterizer: PdfRasterizer,
        min_text_length: int = 50,
        ocr_language: str = "eng",
    ) -> None:
        self._pdf_service = pdf_service
        self._ocr_engine = ocr_engine
        self._rasterizer = rasterizer
        self._min_text_length = min_text_length
        self._ocr_language = ocr_language

    def extract(self, path: Path) -> ExtractionResult:
        page_count: int | None = None
        try:
            page_count = self._pdf_service.get_info(path).page_count
        except Exception as exc:
            Log.debug(f"Could not read page count of {path}: {exc}")

        text = ""
        try:
            text = self._pdf_service.extract_text(path)
        except Exception as exc:
            Log.warning(f"PDF text extraction failed for {path}: {exc}")

        engine = self._ocr_engine
        if engine is not None and self.needs_ocr(text):
            try:
                ocr_text = self._ocr_pages(path, engine)
                if len(ocr_text) > len(text):
                    text = ocr_text
            except Exception as exc:
                Log.warning(f"PDF OCR fallback failed for {path}: {exc}")

        return ExtractionResult(text=text, page_count=page_count)

    def needs_ocr(self, text: str) -> bool:
        return self._ocr_engine is not None and len(text.strip()) < self._min_text_length

    def _ocr_pages(self, path: Path, engine: BaseOcrEngine) -> str:
        Log.info(f"Little text in {path}, running OCR fallback")
        parts: list[str] = []
        for number, png in self._rasterizer.render_pages(path):
            try:
                page_text = engine.recognize(png, self._ocr_language).strip()
            except Exception as exc:
                Log.warning(f"OCR of page {number} of {path} failed: {exc}")
                continue
            if page_text:
                parts.append(f"--- Page {number} ---\n{page_text}")
        return "\n\n".join(parts)
