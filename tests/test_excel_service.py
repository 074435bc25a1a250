import base64

import pandas as pd
import pytest

from subsource_validator.errors import DocumentParseError
from subsource_validator.models import ContentKind, IngestedFile, TextPart
from subsource_validator.services import excel_service
from subsource_validator.services.excel_service import flatten_first_sheet_to_csv
from subsource_validator.services.file_service import ingest_file, to_prompt_part

from conftest import XLSX_TYPE, xlsx_bytes


def test_spreadsheet_normalizes_to_labelled_csv_text(master_xlsx):
    part = to_prompt_part(master_xlsx, "Master List")

    assert isinstance(part, TextPart)
    assert part.text.startswith("DOCUMENT_CONTENT (Master List):\n")
    assert part.text.endswith("\n[End of CSV content]")
    assert "Original,Substitute 1,Substitute 2" in part.text
    assert "M1,M1-SUB" in part.text


def test_only_first_sheet_is_read():
    content = xlsx_bytes(
        [["Original", "Substitute"], ["NTTFS080N10", "SUB-1"]],
        extra_sheets={"Notes": [["SECOND-SHEET-ONLY"]]},
    )
    ingested = ingest_file("master.xlsx", content, XLSX_TYPE)

    text = to_prompt_part(ingested, "Master List").text

    assert "NTTFS080N10,SUB-1" in text
    assert "SECOND-SHEET-ONLY" not in text


def test_cells_with_commas_and_quotes_are_csv_escaped():
    content = xlsx_bytes([["Part", "Note"], ["D1", 'Zener, 5.1V "SOD-123"']])
    ingested = ingest_file("master.xlsx", content, XLSX_TYPE)

    csv_text = flatten_first_sheet_to_csv(ingested.encoded_payload, ingested.original_name)

    assert csv_text.splitlines() == ["Part,Note", 'D1,"Zener, 5.1V ""SOD-123"""']


def test_invalid_workbook_names_the_file():
    ingested = ingest_file("broken.xlsx", b"this is not a workbook", XLSX_TYPE)

    with pytest.raises(DocumentParseError) as excinfo:
        to_prompt_part(ingested, "Master List")

    assert "broken.xlsx" in str(excinfo.value)
    assert excinfo.value.filename == "broken.xlsx"


@pytest.mark.parametrize(
    "filename, media_type, engine",
    [
        ("legacy.xls", "application/vnd.ms-excel", "xlrd"),
        ("legacy_export", "application/vnd.ms-excel", "xlrd"),
        ("master.xlsx", XLSX_TYPE, "openpyxl"),
    ],
)
def test_reader_engine_follows_media_type_and_name(filename, media_type, engine, monkeypatch):
    seen = {}

    def fake_read_excel(buffer, **kwargs):
        seen.update(kwargs)
        return pd.DataFrame([["Vds", "100V"]])

    monkeypatch.setattr(excel_service.pd, "read_excel", fake_read_excel)
    ingested = IngestedFile(
        id="f1",
        original_name=filename,
        encoded_payload=base64.b64encode(b"workbook").decode("ascii"),
        content_kind=ContentKind.SPREADSHEET,
        media_type=media_type,
    )

    part = to_prompt_part(ingested, "Master List")

    assert seen["engine"] == engine
    assert "Vds,100V" in part.text
