class PdfServiceError(Exception):
    """Base exception for PDF document service errors."""


class PageOutOfRangeError(PdfServiceError):
    """Raised when a page index is outside the document."""


class RectOutOfBoundsError(PdfServiceError):
    """Raised when a target rectangle does not fit on its page."""


class InvalidColorError(PdfServiceError):
    """Raised when an annotation colour is not a 6-digit hex string."""


class UnsupportedAnnotationError(PdfServiceError):
    """Raised for annotation kinds that cannot be drawn by add_annotation."""


class PdfWriteLockError(PdfServiceError):
    """Raised when a write handle is unavailable, foreign or already released."""


class InvalidSignatureImageError(PdfServiceError):
    """Raised when signature data is not a base64-encoded PNG."""
