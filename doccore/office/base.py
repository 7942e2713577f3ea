from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class DocxConversion:
    text: str
    warnings: list[str] = field(default_factory=list)


class BaseDocxConverter(ABC):
    """Contract for DOCX-to-text converters."""

    @abstractmethod
    def convert(self, path: Path) -> DocxConversion:
        """Convert a Word document to plain text.

        Raises:
            DocxConversionError: if the file cannot be read or converted.
        """
