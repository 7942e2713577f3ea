import importlib.util
import shutil

from doccore.config.settings import Settings
from doccore.ingestion.models import Capabilities
from doccore.logging.logger import Log


def _module_available(name: str) -> bool:
    return importlib.util.find_spec(name) is not None


def detect_capabilities(settings: Settings) -> Capabilities:
    """Probe the optional OCR and DOCX backends once, warning about gaps."""
    ocr = (
        _module_available("pytesseract")
        and _module_available("PIL")
        and shutil.which(settings.tesseract_cmd) is not None
    )
    docx = _module_available("docx")

    if not ocr:
        Log.warning_once(
            "capability:ocr",
            f"Tesseract OCR not available ({settings.tesseract_cmd}), "
            "image OCR and the scanned-PDF fallback are disabled",
        )
    if not docx:
        Log.warning_once(
            "capability:docx",
            "python-docx not available, DOCX text extraction is disabled",
        )
    return Capabilities(ocr=ocr, docx=docx)
