"""
Excel Service - Flattens spreadsheet uploads into CSV text for the prompt
"""
import base64
import io

import pandas as pd

from ..errors import DocumentParseError

LEGACY_EXCEL_TYPE = 'application/vnd.ms-excel'


def _engine_for(filename: str, media_type: str = None) -> str:
    if media_type == LEGACY_EXCEL_TYPE or filename.lower().endswith('.xls'):
        return 'xlrd'
    return 'openpyxl'


def read_first_sheet(file_content: bytes, filename: str, media_type: str = None) -> pd.DataFrame:
    """
    Read the first worksheet (by position, not by name) of a workbook

    Args:
        file_content: Binary content of the Excel file
        filename: Original filename
        media_type: Uploaded media type; with the filename it picks the reader engine

    Returns:
        DataFrame with every cell as text and no header row consumed
    """
    excel_file = io.BytesIO(file_content)
    return pd.read_excel(
        excel_file,
        sheet_name=0,
        header=None,
        dtype=str,
        engine=_engine_for(filename, media_type),
    )


def sheet_to_csv(df: pd.DataFrame) -> str:
    """Row-major, comma delimited, minimal quoting, blank cells left empty"""
    csv_text = df.fillna('').to_csv(index=False, header=False, lineterminator='\n')
    return csv_text.rstrip('\n')


def flatten_first_sheet_to_csv(encoded_payload: str, filename: str, media_type: str = None) -> str:
    """
    Decode a base64 workbook and flatten its first sheet to CSV text

    Args:
        encoded_payload: Base64 workbook bytes
        filename: Original filename, named in the error on failure
        media_type: Uploaded media type

    Returns:
        CSV text of the first sheet
    """
    try:
        file_content = base64.b64decode(encoded_payload, validate=True)
        df = read_first_sheet(file_content, filename, media_type)
    except Exception as e:
        print(f"Excel parse error for {filename}: {e}")
        raise DocumentParseError(filename, str(e)) from e

    return sheet_to_csv(df)
