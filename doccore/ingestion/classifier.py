from pathlib import PurePath, PurePosixPath

from doccore.ingestion.models import DocumentKind

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "tiff", "tif"})
DOCX_EXTENSIONS = frozenset({"docx", "doc"})
TEXT_EXTENSIONS = frozenset({"txt"})
SUPPORTED_EXTENSIONS = frozenset({"pdf"}) | IMAGE_EXTENSIONS | DOCX_EXTENSIONS | TEXT_EXTENSIONS


def extension_of(path: str | PurePath) -> str:
    return PurePath(path).suffix.lower().lstrip(".")


class IngestionClassifier:
    """Maps a file path to its extraction strategy and cabinet membership."""

    def __init__(self, cabinet_dir: str = "_cabinet") -> None:
        self._cabinet_dir = cabinet_dir

    def classify(self, path: str | PurePath) -> DocumentKind:
        ext = extension_of(path)
        if ext not in SUPPORTED_EXTENSIONS:
            return DocumentKind.UNSUPPORTED
        if ext == "pdf":
            return DocumentKind.PDF
        if ext in IMAGE_EXTENSIONS:
            return DocumentKind.IMAGE
        if ext in DOCX_EXTENSIONS:
            return DocumentKind.DOCX
        return DocumentKind.TEXT

    def is_supported(self, path: str | PurePath) -> bool:
        return self.classify(path) is not DocumentKind.UNSUPPORTED

    def is_cabinet_path(self, relative_path: str | PurePath) -> bool:
        """True when a vault-relative path lies inside the cabinet folder."""
        parts = PurePosixPath(PurePath(relative_path).as_posix()).parts
        return len(parts) > 1 and parts[0] == self._cabinet_dir
