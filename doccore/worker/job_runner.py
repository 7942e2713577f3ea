from pathlib import Path

from doccore.ingestion.classifier import IngestionClassifier
from doccore.ingestion.exceptions import MissingCapabilityError
from doccore.ingestion.extractors.base import BaseTextExtractor
from doccore.ingestion.index import BaseDocumentIndex
from doccore.ingestion.models import DocumentKind, ExtractionResult, OcrStatus
from doccore.logging.logger import Log
from doccore.vault.paths import VaultPaths


class ExtractionJobRunner:
    """Run one extraction job and record the outcome as OCR status.

    Errors never escape: a failing document is marked ``failed`` and left
    alone until someone re-indexes it.
    """

    def __init__(
        self,
        index: BaseDocumentIndex,
        classifier: IngestionClassifier,
        extractors: dict[DocumentKind, BaseTextExtractor],
        vault_paths: VaultPaths,
    ) -> None:
        self._index = index
        self._classifier = classifier
        self._extractors = extractors
        self._paths = vault_paths

    def run(self, path: str) -> None:
        absolute = self._paths.resolve(path)
        if not absolute.exists():
            Log.warning(f"Skipping {path}: file no longer exists")
            return

        kind = self._classifier.classify(path)
        self._index.update_ocr_status(path, OcrStatus.PROCESSING, None)
        Log.info(f"Extracting text from {path} ({kind.value})")
        try:
            result = self._extract(kind, absolute)
            self._index.update_ocr_status(
                path, OcrStatus.DONE, result.text or None, result.page_count
            )
        except Exception as exc:
            self._handle_failure(path, exc)
            return
        Log.info(f"Extracted {len(result.text)} chars from {path}")

    def _extract(self, kind: DocumentKind, absolute: Path) -> ExtractionResult:
        extractor = self._extractors.get(kind)
        if extractor is None:
            raise MissingCapabilityError(f"No extractor available for {kind.value} documents")
        return extractor.extract(absolute)

    def _handle_failure(self, path: str, exc: Exception) -> None:
        Log.error(f"Extraction failed for {path}: {exc}")
        self._index.update_ocr_status(path, OcrStatus.FAILED, None)
