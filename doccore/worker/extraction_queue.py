import queue
import threading

from doccore.ingestion.classifier import IngestionClassifier
from doccore.ingestion.exceptions import UnsupportedDocumentError
from doccore.ingestion.index import BaseDocumentIndex
from doccore.logging.logger import Log
from doccore.worker.job_runner import ExtractionJobRunner

_STOP = None


class ExtractionQueue:
    """Single-consumer FIFO of vault-relative document paths.

    The queue owns its worker thread: the first ``enqueue`` starts it, it
    drains jobs one at a time in arrival order and then blocks until more
    work arrives. Paths are not de-duplicated; enqueueing a path twice runs
    it twice.
    """

    def __init__(
        self,
        runner: ExtractionJobRunner,
        index: BaseDocumentIndex,
        classifier: IngestionClassifier,
    ) -> None:
        self._runner = runner
        self._index = index
        self._classifier = classifier
        self._jobs: queue.Queue[str | None] = queue.Queue()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    def enqueue(self, path: str) -> None:
        """Queue ``path`` for extraction.

        Raises:
            UnsupportedDocumentError: if the extension is not in the allowlist.
        """
        if not self._classifier.is_supported(path):
            raise UnsupportedDocumentError(f"Unsupported document type: {path}")
        self._jobs.put(path)
        Log.debug(f"Queued {path} for extraction")
        self._ensure_worker()

    def reprocess_pending(self) -> int:
        """Re-queue every document still ``pending`` in the index.

        Failed documents are not touched.
        """
        pending = self._index.find_pending()
        for document in pending:
            self._jobs.put(document.path)
        if pending:
            self._ensure_worker()
        Log.info(f"Re-queued {len(pending)} pending documents")
        return len(pending)

    def wait_until_idle(self) -> None:
        """Block until every queued job has finished."""
        self._jobs.join()

    def stop(self, timeout: float | None = None) -> None:
        """Finish queued jobs, then end the worker thread.

        The worker keeps ownership of the queue until it exits, so a ``stop``
        that times out never lets ``enqueue`` start a second consumer.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._jobs.put(_STOP)
        thread.join(timeout)
        if thread.is_alive():
            Log.warning(f"Extraction worker still busy after {timeout}s")

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(
                target=self._run, name="doccore-extraction", daemon=True
            )
            self._thread.start()

    def _retire(self) -> bool:
        with self._lock:
            # Jobs queued after the stop marker keep this worker running.
            if not self._jobs.empty():
                return False
            self._thread = None
            return True

    def _run(self) -> None:
        Log.info("Extraction worker started")
        while True:
            path = self._jobs.get()
            try:
                if path is _STOP:
                    if self._retire():
                        Log.info("Extraction worker stopped")
                        return
                    continue
                self._runner.run(path)
            except Exception as exc:
                Log.exception(f"Extraction job for {path} crashed: {exc}")
            finally:
                self._jobs.task_done()
