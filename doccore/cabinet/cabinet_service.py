import shutil
from pathlib import Path

from doccore.ingestion.classifier import IngestionClassifier
from doccore.ingestion.exceptions import UnsupportedDocumentError
from doccore.ingestion.index import BaseDocumentIndex
from doccore.ingestion.models import DocumentKind
from doccore.logging.logger import Log
from doccore.vault.paths import VaultPaths
from doccore.worker.extraction_queue import ExtractionQueue


class CabinetService:
    """Entry point for files entering or leaving the vault's document cabinet."""

    def __init__(
        self,
        vault_paths: VaultPaths,
        classifier: IngestionClassifier,
        index: BaseDocumentIndex,
        extraction_queue: ExtractionQueue,
        cabinet_dir: str = "_cabinet",
    ) -> None:
        self._paths = vault_paths
        self._classifier = classifier
        self._index = index
        self._queue = extraction_queue
        self._cabinet_dir = cabinet_dir

    @property
    def cabinet_root(self) -> Path:
        return self._paths.root / self._cabinet_dir

    def is_cabinet_path(self, path: str | Path) -> bool:
        return self._classifier.is_cabinet_path(self._paths.relative(path))

    def ensure_cabinet_dir(self) -> None:
        self.cabinet_root.mkdir(parents=True, exist_ok=True)

    def index_document(self, path: str | Path) -> str:
        """Register a cabinet file as pending and queue its extraction.

        Returns the vault-relative path.

        Raises:
            UnsupportedDocumentError: if the file type is not supported.
        """
        relative = self._paths.relative(path)
        kind = self._classifier.classify(relative)
        if kind is DocumentKind.UNSUPPORTED:
            raise UnsupportedDocumentError(f"Unsupported document type: {relative}")
        self._index.index_document(relative, kind)
        self._queue.enqueue(relative)
        Log.info(f"Indexed cabinet document {relative} ({kind.value})")
        return relative

    def remove_document(self, path: str | Path) -> None:
        relative = self._paths.relative(path)
        self._index.remove_document(relative)
        Log.info(f"Removed cabinet document {relative}")

    def copy_file(self, source: str | Path, target_folder: str) -> tuple[str, str]:
        """Copy ``source`` into ``<cabinet>/<target_folder>`` and index it.

        An existing file of the same name is kept; the copy becomes
        ``name (1).ext``, ``name (2).ext`` and so on.

        Returns:
            (vault-relative path, final filename)

        Raises:
            UnsupportedDocumentError: if the file type is not supported.
        """
        source_path = Path(source)
        if not self._classifier.is_supported(source_path):
            raise UnsupportedDocumentError(f"Unsupported document type: {source_path.name}")
        folder = self.cabinet_root / target_folder
        folder.mkdir(parents=True, exist_ok=True)

        destination = folder / source_path.name
        counter = 1
        while destination.exists():
            destination = folder / f"{source_path.stem} ({counter}){source_path.suffix}"
            counter += 1

        shutil.copyfile(source_path, destination)
        relative = self.index_document(destination)
        return relative, destination.name

    def reprocess_pending(self) -> int:
        return self._queue.reprocess_pending()

    def wait_until_idle(self) -> None:
        self._queue.wait_until_idle()

    def stop(self) -> None:
        self._queue.stop()
