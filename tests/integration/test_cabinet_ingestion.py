from pathlib import Path
from unittest.mock import patch

import docx
import pytest

from doubles import InMemoryDocumentIndex

from doccore.config.settings import Settings
from doccore.fields import FieldType, detect_fields
from doccore.ingestion.models import Capabilities, DocumentKind, OcrStatus
from doccore.main import build_cabinet_service
from doccore.pdf.document_service import PdfDocumentService
from doccore.pdf.models import FieldRect, Rect
from doccore.vault.paths import VaultPaths


@pytest.mark.integration
class TestCabinetIngestion:
    def test_mixed_documents_are_extracted(self, vault: Path, tmp_path: Path, make_pdf) -> None:  # type: ignore[no-untyped-def]
        sources = tmp_path / "incoming"
        sources.mkdir()
        (sources / "lease.pdf").write_bytes(
            make_pdf([["This lease agreement is made between the landlord and the tenant."]])
        )
        (sources / "notes.txt").write_text("Call the landlord about the boiler.", encoding="utf-8")
        letter = docx.Document()
        letter.add_paragraph("Dear tenant, your deposit has been returned.")
        letter.save(str(sources / "letter.docx"))
        (sources / "photo.jpg").write_bytes(b"\xff\xd8\xff")

        index = InMemoryDocumentIndex()
        cabinet = build_cabinet_service(
            Settings(vault_path=vault), index, Capabilities(ocr=False, docx=True)
        )
        cabinet.ensure_cabinet_dir()

        paths = [
            cabinet.copy_file(sources / name, "Housing")[0]
            for name in ("lease.pdf", "notes.txt", "letter.docx", "photo.jpg")
        ]
        cabinet.wait_until_idle()
        cabinet.stop()

        lease, notes, letter_path, photo = paths
        assert index.status_of(lease) is OcrStatus.DONE
        assert "This lease agreement" in (index.texts[lease] or "")
        assert index.page_counts[lease] == 1
        assert index.texts[notes] == "Call the landlord about the boiler."
        assert index.texts[letter_path] == "Dear tenant, your deposit has been returned."
        # No OCR backend: images fail rather than stall the queue.
        assert index.status_of(photo) is OcrStatus.FAILED
        assert index.max_processing == 1

    def test_scanned_pdf_falls_back_to_ocr(
        self, vault: Path, empty_pdf_bytes: bytes
    ) -> None:
        (vault / "_cabinet").mkdir()
        (vault / "_cabinet" / "scan.pdf").write_bytes(empty_pdf_bytes)
        index = InMemoryDocumentIndex()

        with patch(
            "doccore.ocr.tesseract_adapter.pytesseract.image_to_string",
            return_value="INVOICE 2024-017 Amount due 1,250.00 EUR payable within 30 days",
        ):
            cabinet = build_cabinet_service(
                Settings(vault_path=vault, ocr_render_scale=1.0),
                index,
                Capabilities(ocr=True, docx=False),
            )
            cabinet.index_document("_cabinet/scan.pdf")
            cabinet.wait_until_idle()
            cabinet.stop()

        assert index.statuses_for("_cabinet/scan.pdf") == [OcrStatus.PROCESSING, OcrStatus.DONE]
        assert (index.texts["_cabinet/scan.pdf"] or "").startswith("--- Page 1 ---\nINVOICE 2024-017")

    def test_pending_documents_are_reprocessed_on_startup(self, vault: Path) -> None:
        (vault / "_cabinet").mkdir()
        (vault / "_cabinet" / "a.txt").write_text("first", encoding="utf-8")
        (vault / "_cabinet" / "b.txt").write_text("second", encoding="utf-8")
        index = InMemoryDocumentIndex()
        index.index_document("_cabinet/a.txt", DocumentKind.TEXT)
        index.index_document("_cabinet/b.txt", DocumentKind.TEXT)

        cabinet = build_cabinet_service(
            Settings(vault_path=vault), index, Capabilities(ocr=False, docx=False)
        )
        assert cabinet.reprocess_pending() == 2
        cabinet.wait_until_idle()
        cabinet.stop()

        assert index.texts == {"_cabinet/a.txt": "first", "_cabinet/b.txt": "second"}


@pytest.mark.integration
class TestFieldFillRoundTrip:
    def test_detected_fields_can_be_filled(self, vault: Path, make_pdf) -> None:  # type: ignore[no-untyped-def]
        (vault / "nda.pdf").write_bytes(
            make_pdf([["Mutual NDA", "Disclosing party: [Company Name]", "Date: [Date]"]])
        )
        service = PdfDocumentService(VaultPaths(vault))

        fields = detect_fields(service.extract_text("nda.pdf"))
        assert [(f.label, f.page, f.line_number) for f in fields] == [
            ("Company Name", 0, 2),
            ("Date", 0, 3),
        ]
        assert fields[0].suggested_type is FieldType.COMPANY

        with service.open_for_write("nda.pdf") as handle:
            service.fill_field(handle, FieldRect(0, Rect(300, 500, 200, 14)), "Acme GmbH")
            signed = service.flatten(handle)

        assert signed == "nda (signed).pdf"
        assert "Acme GmbH" in service.extract_text(signed)
