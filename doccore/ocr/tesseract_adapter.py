import io
from pathlib import Path

import pytesseract
from PIL import Image

from doccore.ingestion.exceptions import OcrError
from doccore.ocr.base import BaseOcrEngine


class TesseractOcrEngine(BaseOcrEngine):
    """Runs OCR through the Tesseract binary via pytesseract."""

    def __init__(self, tesseract_cmd: str = "tesseract") -> None:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image: bytes | Path, language: str) -> str:
        source = io.BytesIO(image) if isinstance(image, bytes) else image
        try:
            with Image.open(source) as img:
                return pytesseract.image_to_string(img, lang=language)
        except Exception as exc:
            raise OcrError(f"tesseract OCR failed: {exc}") from exc
