from doccore.config.settings import Settings
from doccore.ingestion.extractors.base import BaseTextExtractor
from doccore.ingestion.extractors.docx_extractor import DocxTextExtractor
from doccore.ingestion.extractors.image_extractor import ImageTextExtractor
from doccore.ingestion.extractors.pdf_extractor import PdfTextExtractor
from doccore.ingestion.extractors.text_extractor import PlainTextExtractor
from doccore.ingestion.models import Capabilities, DocumentKind
from doccore.ocr.base import BaseOcrEngine
from doccore.pdf.document_service import PdfDocumentService
from doccore.pdf.rasterizer import PdfRasterizer


class ExtractorFactory:
    """Builds the extractor table for the capabilities found at startup.

    Kinds whose backend is missing get no entry; the job runner fails those
    documents instead of crashing.
    """

    @classmethod
    def create(
        cls,
        settings: Settings,
        capabilities: Capabilities,
        pdf_service: PdfDocumentService,
    ) -> dict[DocumentKind, BaseTextExtractor]:
        ocr_engine = cls._ocr_engine(settings) if capabilities.ocr else None
        rasterizer = PdfRasterizer(
            scale=settings.ocr_render_scale,
            max_pages=settings.ocr_max_pages,
        )
        extractors: dict[DocumentKind, BaseTextExtractor] = {
            DocumentKind.PDF: PdfTextExtractor(
                pdf_service,
                ocr_engine,
                rasterizer,
                min_text_length=settings.min_pdf_text_length,
                ocr_language=settings.ocr_language,
            ),
            DocumentKind.TEXT: PlainTextExtractor(max_chars=settings.max_text_chars),
        }
        if ocr_engine is not None:
            extractors[DocumentKind.IMAGE] = ImageTextExtractor(
                ocr_engine, ocr_language=settings.ocr_language
            )
        if capabilities.docx:
            from doccore.office.python_docx_adapter import PythonDocxConverter

            extractors[DocumentKind.DOCX] = DocxTextExtractor(
                PythonDocxConverter(), max_chars=settings.max_text_chars
            )
        return extractors

    @staticmethod
    def _ocr_engine(settings: Settings) -> BaseOcrEngine:
        # pytesseract is only imported once OCR is known to be usable.
        from doccore.ocr.tesseract_adapter import TesseractOcrEngine

        return TesseractOcrEngine(settings.tesseract_cmd)
