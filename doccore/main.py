from doccore.cabinet.cabinet_service import CabinetService
from doccore.config.settings import Settings
from doccore.database.connection import close_pool, init_pool
from doccore.database.repositories.cabinet_documents_repository import CabinetDocumentsRepository
from doccore.ingestion.capabilities import detect_capabilities
from doccore.ingestion.classifier import IngestionClassifier
from doccore.ingestion.extractors.factory import ExtractorFactory
from doccore.ingestion.index import BaseDocumentIndex
from doccore.ingestion.models import Capabilities
from doccore.logging.logger import Log
from doccore.pdf.document_service import PdfDocumentService
from doccore.vault.paths import VaultPaths
from doccore.worker.extraction_queue import ExtractionQueue
from doccore.worker.job_runner import ExtractionJobRunner


def build_cabinet_service(
    settings: Settings,
    index: BaseDocumentIndex,
    capabilities: Capabilities,
) -> CabinetService:
    """Wire the PDF service, extractors, queue and cabinet service together."""
    vault_paths = VaultPaths(settings.vault_path)
    classifier = IngestionClassifier(settings.cabinet_dir)
    pdf_service = PdfDocumentService(vault_paths)
    extractors = ExtractorFactory.create(settings, capabilities, pdf_service)
    runner = ExtractionJobRunner(index, classifier, extractors, vault_paths)
    extraction_queue = ExtractionQueue(runner, index, classifier)
    return CabinetService(
        vault_paths,
        classifier,
        index,
        extraction_queue,
        cabinet_dir=settings.cabinet_dir,
    )


def main() -> None:
    """Entry point: open the index, sweep pending cabinet documents, drain the queue."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        index = CabinetDocumentsRepository()
        index.ensure_schema()
        capabilities = detect_capabilities(settings)
        cabinet = build_cabinet_service(settings, index, capabilities)
        cabinet.ensure_cabinet_dir()
        queued = cabinet.reprocess_pending()
        Log.info(f"Processing {queued} pending cabinet documents")
        cabinet.wait_until_idle()
        cabinet.stop()
    except KeyboardInterrupt:
        Log.info("Interrupted, shutting down")
    finally:
        close_pool()


if __name__ == "__main__":
    main()
