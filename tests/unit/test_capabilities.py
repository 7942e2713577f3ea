from unittest.mock import patch

import pytest

from doccore.config.settings import Settings
from doccore.ingestion.capabilities import detect_capabilities
from doccore.ingestion.models import Capabilities
from doccore.logging.logger import Log

MODULE = "doccore.ingestion.capabilities"


@pytest.fixture(autouse=True)
def _reset_warnings():  # type: ignore[no-untyped-def]
    Log._warned.clear()
    yield
    Log._warned.clear()


def _settings() -> Settings:
    return Settings(tesseract_cmd="tesseract")


class TestDetectCapabilities:
    def test_everything_available(self) -> None:
        with (
            patch(f"{MODULE}._module_available", return_value=True),
            patch(f"{MODULE}.shutil.which", return_value="/usr/bin/tesseract"),
        ):
            assert detect_capabilities(_settings()) == Capabilities(ocr=True, docx=True)

    def test_missing_binary_disables_ocr_only(self) -> None:
        with (
            patch(f"{MODULE}._module_available", return_value=True),
            patch(f"{MODULE}.shutil.which", return_value=None),
        ):
            assert detect_capabilities(_settings()) == Capabilities(ocr=False, docx=True)

    def test_missing_python_docx_disables_docx(self) -> None:
        with (
            patch(f"{MODULE}._module_available", side_effect=lambda name: name != "docx"),
            patch(f"{MODULE}.shutil.which", return_value="/usr/bin/tesseract"),
        ):
            assert detect_capabilities(_settings()) == Capabilities(ocr=True, docx=False)

    def test_missing_pytesseract_disables_ocr(self) -> None:
        with (
            patch(f"{MODULE}._module_available", side_effect=lambda name: name != "pytesseract"),
            patch(f"{MODULE}.shutil.which", return_value="/usr/bin/tesseract"),
        ):
            assert detect_capabilities(_settings()).ocr is False


class TestMissingCapabilityWarnings:
    def test_warns_once_per_backend(self, caplog: pytest.LogCaptureFixture) -> None:
        with (
            patch(f"{MODULE}._module_available", return_value=False),
            patch(f"{MODULE}.shutil.which", return_value=None),
            caplog.at_level("WARNING", logger="doccore"),
        ):
            detect_capabilities(_settings())
            detect_capabilities(_settings())

        messages = [r.getMessage() for r in caplog.records]
        assert sum("Tesseract OCR not available" in m for m in messages) == 1
        assert sum("python-docx not available" in m for m in messages) == 1

    def test_no_warning_when_available(self, caplog: pytest.LogCaptureFixture) -> None:
        with (
            patch(f"{MODULE}._module_available", return_value=True),
            patch(f"{MODULE}.shutil.which", return_value="/usr/bin/tesseract"),
            caplog.at_level("WARNING", logger="doccore"),
        ):
            detect_capabilities(_settings())

        assert caplog.records == []
