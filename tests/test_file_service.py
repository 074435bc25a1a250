import base64
import io

import pytest
from werkzeug.datastructures import FileStorage

from subsource_validator.errors import InputValidationError, UnsupportedTypeError
from subsource_validator.models import BinaryPart, ContentKind
from subsource_validator.services import file_service
from subsource_validator.services.file_service import (
    detect_content_kind,
    ingest_file,
    ingest_files,
    resolve_media_type,
    to_prompt_part,
)

from conftest import XLSX_TYPE


def _upload(name, content, content_type):
    return FileStorage(stream=io.BytesIO(content), filename=name, content_type=content_type)


@pytest.mark.parametrize(
    "filename, media_type, expected",
    [
        ("scan.png", "image/png", ContentKind.PNG),
        ("photo.jpg", "image/jpeg", ContentKind.JPEG),
        ("photo.jpg", "image/jpg", ContentKind.JPEG),
        ("photo.webp", "image/webp", ContentKind.WEBP),
        ("master.xlsx", XLSX_TYPE, ContentKind.SPREADSHEET),
        ("legacy.xls", "application/vnd.ms-excel", ContentKind.SPREADSHEET),
        ("master.xlsx", "", ContentKind.SPREADSHEET),
        ("datasheet.pdf", "application/pdf", ContentKind.PDF),
        ("mystery", "", ContentKind.PDF),
    ],
)
def test_detect_content_kind(filename, media_type, expected):
    assert detect_content_kind(filename, media_type) is expected


def test_png_wins_over_spreadsheet_name():
    assert detect_content_kind("odd.xlsx", "image/png") is ContentKind.PNG


def test_resolve_media_type_prefers_declared_type():
    assert resolve_media_type("a.pdf", "image/png") == "image/png"
    assert resolve_media_type("a.pdf", "application/pdf; charset=binary") == "application/pdf"


def test_resolve_media_type_guesses_from_extension_for_generic_types():
    assert resolve_media_type("master.xlsx", "application/octet-stream") == XLSX_TYPE
    assert resolve_media_type("legacy.xls", None) == "application/vnd.ms-excel"
    assert resolve_media_type("datasheet.pdf", "") == "application/pdf"


def test_ingest_file_encodes_payload():
    ingested = ingest_file("M1_datasheet.pdf", b"%PDF-1.4 body", "application/pdf")

    assert ingested.original_name == "M1_datasheet.pdf"
    assert ingested.content_kind is ContentKind.PDF
    assert base64.b64decode(ingested.encoded_payload) == b"%PDF-1.4 body"


def test_ingest_file_ids_are_unique():
    ids = {ingest_file(f"ds{i}.pdf", b"%PDF", "application/pdf").id for i in range(20)}
    assert len(ids) == 20


def test_ingest_file_rejects_docx_by_name():
    with pytest.raises(UnsupportedTypeError) as excinfo:
        ingest_file("notes.docx", b"PK\x03\x04", None)

    assert "notes.docx" in str(excinfo.value)
    assert excinfo.value.filename == "notes.docx"


def test_ingest_file_rejects_empty_upload():
    with pytest.raises(InputValidationError):
        ingest_file("empty.pdf", b"", "application/pdf")


def test_pdf_normalizes_to_binary_part():
    ingested = ingest_file("M1_datasheet.pdf", b"%PDF-1.4 body", "application/pdf")

    part = to_prompt_part(ingested, "Datasheet")

    assert isinstance(part, BinaryPart)
    assert part.media_kind == "application/pdf"
    assert part.payload == ingested.encoded_payload
    assert part.filename == "M1_datasheet.pdf"


@pytest.mark.parametrize(
    "filename, media_type",
    [
        ("scan.png", "image/png"),
        ("photo.jpg", "image/jpeg"),
        ("photo.jpg", "image/jpg"),
        ("photo.webp", "image/webp"),
    ],
)
def test_images_keep_their_media_kind(filename, media_type):
    part = to_prompt_part(ingest_file(filename, b"\x00\x01", media_type), "Image")

    assert isinstance(part, BinaryPart)
    assert part.media_kind == media_type


def test_ingest_files_keeps_selection_order(monkeypatch):
    monkeypatch.setattr(file_service, "NORMALIZE_WORKERS", 3)
    uploads = [_upload(f"part_{i}.pdf", f"%PDF {i}".encode(), "application/pdf") for i in range(6)]

    ingested = ingest_files(uploads)

    assert [f.original_name for f in ingested] == [f"part_{i}.pdf" for i in range(6)]


def test_ingest_files_rejects_whole_selection_on_unsupported_file():
    uploads = [
        _upload("ok.pdf", b"%PDF", "application/pdf"),
        _upload("report.docx", b"PK", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
    ]

    with pytest.raises(UnsupportedTypeError) as excinfo:
        ingest_files(uploads)

    assert "report.docx" in str(excinfo.value)


def test_ingest_files_with_no_uploads():
    assert ingest_files([]) == []
