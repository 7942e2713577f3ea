from abc import ABC, abstractmethod
from pathlib import Path


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def recognize(self, image: bytes | Path, language: str) -> str:
        """Recognize text in an image.

        Args:
            image: Encoded image bytes (e.g. a rendered PNG page) or an image file path.
            language: Engine language code, e.g. ``"eng"``.

        Returns:
            Recognized text, unstripped.

        Raises:
            OcrError: if recognition fails for any reason.
        """
