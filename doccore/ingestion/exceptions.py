class IngestionError(Exception):
    """Base exception for all ingestion errors."""


class UnsupportedDocumentError(IngestionError):
    """Raised when a file's extension is outside the supported allowlist."""


class MissingCapabilityError(IngestionError):
    """Raised when the backend needed for a document kind is not installed."""


class OcrError(IngestionError):
    """Raised when the OCR engine fails on an image."""


class DocxConversionError(IngestionError):
    """Raised when a DOCX file cannot be converted to text."""
