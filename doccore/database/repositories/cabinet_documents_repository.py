from psycopg.rows import dict_row

from doccore.database.connection import get_connection
from doccore.database.models import CabinetDocumentRecord
from doccore.ingestion.index import BaseDocumentIndex
from doccore.ingestion.models import CabinetDocument, DocumentKind, OcrStatus

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS cabinet_documents (
    path        TEXT PRIMARY KEY,
    kind        TEXT NOT NULL,
    ocr_status  TEXT NOT NULL DEFAULT 'pending',
    ocr_text    TEXT,
    page_count  INTEGER,
    indexed_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class CabinetDocumentsRepository(BaseDocumentIndex):
    """Database operations for the cabinet_documents table."""

    def ensure_schema(self) -> None:
        with get_connection() as conn:
            conn.execute(CREATE_TABLE_SQL)
            conn.commit()

    def index_document(self, path: str, kind: DocumentKind) -> None:
        """Insert a pending row, or reset an existing one to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO cabinet_documents (path, kind, ocr_status)
                VALUES (%s, %s, 'pending')
                ON CONFLICT (path) DO UPDATE
                SET kind = EXCLUDED.kind,
                    ocr_status = 'pending',
                    ocr_text = NULL,
                    updated_at = NOW()
                """,
                (path, kind.value),
            )
            conn.commit()

    def remove_document(self, path: str) -> None:
        with get_connection() as conn:
            conn.execute("DELETE FROM cabinet_documents WHERE path = %s", (path,))
            conn.commit()

    def update_ocr_status(
        self,
        path: str,
        status: OcrStatus,
        text: str | None,
        page_count: int | None = None,
    ) -> None:
        """Persist the OCR status and text; page_count is kept when not given."""
        if text is not None:
            # PostgreSQL text values cannot hold NUL.
            text = text.replace("\x00", "")
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE cabinet_documents
                SET ocr_status = %s,
                    ocr_text = %s,
                    page_count = COALESCE(%s::integer, page_count),
                    updated_at = NOW()
                WHERE path = %s
                """,
                (status.value, text, page_count, path),
            )
            conn.commit()

    def find_pending(self) -> list[CabinetDocument]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT path, kind, ocr_status
                    FROM cabinet_documents
                    WHERE ocr_status = 'pending'
                    ORDER BY indexed_at, path
                    """
                )
                rows = cur.fetchall()

        return [
            CabinetDocument(
                path=row["path"],
                kind=DocumentKind(row["kind"]),
                ocr_status=OcrStatus(row["ocr_status"]),
            )
            for row in rows
        ]

    def find_by_path(self, path: str) -> CabinetDocumentRecord | None:
        """Find a document row by path. Useful for tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT path, kind, ocr_status, ocr_text, page_count,
                           indexed_at, updated_at
                    FROM cabinet_documents
                    WHERE path = %s
                    """,
                    (path,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return CabinetDocumentRecord(**row)
