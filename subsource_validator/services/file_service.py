"""
File Service - Turns uploaded files into ingested payloads and prompt parts
"""
import base64
import concurrent.futures
import mimetypes
import uuid
from typing import Iterable, List, Tuple

from ..config import NORMALIZE_WORKERS
from ..errors import IngestionError, InputValidationError, UnsupportedTypeError
from ..models import BinaryPart, ContentKind, IngestedFile, PromptPart, TextPart
from .excel_service import flatten_first_sheet_to_csv

SUPPORTED_MEDIA_TYPES = (
    'application/pdf',
    'image/png',
    'image/jpeg',
    'image/jpg',
    'image/webp',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',  # .xlsx
    'application/vnd.ms-excel',  # .xls
)

# Extensions the platform mime table may not know about
_EXTENSION_TYPES = {
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.xls': 'application/vnd.ms-excel',
    '.webp': 'image/webp',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
}


def resolve_media_type(filename: str, declared_type: str = None) -> str:
    """
    Pick the media type used for validation and kind detection.

    The client-reported type wins; a missing or generic type falls back to a
    guess from the filename extension.
    """
    declared = (declared_type or '').split(';')[0].strip().lower()
    if declared and declared != 'application/octet-stream':
        return declared

    lowered = (filename or '').lower()
    for extension, media_type in _EXTENSION_TYPES.items():
        if lowered.endswith(extension):
            return media_type

    guessed, _ = mimetypes.guess_type(filename or '')
    return guessed or declared


def detect_content_kind(filename: str, media_type: str) -> ContentKind:
    """
    Map a media type onto a content kind, first match wins:
    png, jpeg/jpg, webp, spreadsheet (type or .xlsx/.xls name), else PDF.
    """
    media_type = (media_type or '').lower()
    lowered = (filename or '').lower()

    if 'png' in media_type:
        return ContentKind.PNG
    if 'jpeg' in media_type or 'jpg' in media_type:
        return ContentKind.JPEG
    if 'webp' in media_type:
        return ContentKind.WEBP
    if 'sheet' in media_type or 'excel' in media_type or lowered.endswith('.xlsx') or lowered.endswith('.xls'):
        return ContentKind.SPREADSHEET
    return ContentKind.PDF


def validate_media_type(filename: str, media_type: str) -> None:
    if media_type not in SUPPORTED_MEDIA_TYPES:
        raise UnsupportedTypeError(filename, media_type)


def ingest_file(filename: str, content: bytes, declared_type: str = None) -> IngestedFile:
    """
    Ingest one uploaded file

    Args:
        filename: Original filename as uploaded
        content: Raw file bytes
        declared_type: Media type reported by the client, if any

    Returns:
        IngestedFile carrying the base64 payload and its content kind
    """
    media_type = resolve_media_type(filename, declared_type)
    validate_media_type(filename, media_type)

    if not content:
        raise InputValidationError(f"Empty uploads are not allowed: {filename}")

    return IngestedFile(
        id=uuid.uuid4().hex,
        original_name=filename,
        encoded_payload=base64.b64encode(content).decode('ascii'),
        content_kind=detect_content_kind(filename, media_type),
        media_type=media_type,
    )


def ingest_upload(upload) -> IngestedFile:
    """Ingest a werkzeug FileStorage (or anything with filename/mimetype/read)"""
    filename = upload.filename or ''
    if not filename:
        raise InputValidationError("No file selected")

    # Reject before reading anything into the session
    validate_media_type(filename, resolve_media_type(filename, getattr(upload, 'mimetype', None)))

    try:
        content = upload.read()
    except OSError as e:
        raise IngestionError(f"Could not read uploaded file {filename}: {e}") from e

    return ingest_file(filename, content, getattr(upload, 'mimetype', None))


def ingest_files(uploads: Iterable) -> List[IngestedFile]:
    """
    Ingest a multi-file selection. Files are read concurrently; the result
    keeps the selection order.
    """
    uploads = list(uploads)
    if not uploads:
        return []

    # Validate the whole selection first so one bad file rejects it atomically
    for upload in uploads:
        filename = upload.filename or ''
        validate_media_type(filename, resolve_media_type(filename, getattr(upload, 'mimetype', None)))

    workers = min(NORMALIZE_WORKERS, len(uploads))
    with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        return list(executor.map(ingest_upload, uploads))


def to_prompt_part(ingested: IngestedFile, label: str) -> PromptPart:
    """
    Normalize one ingested file into a prompt part

    Spreadsheets become a labelled CSV text block; PDFs and images are passed
    through as inline binary for the vision model, under the media type they
    were uploaded with.
    """
    validate_media_type(ingested.original_name, ingested.media_type)

    if ingested.is_spreadsheet:
        csv_text = flatten_first_sheet_to_csv(
            ingested.encoded_payload, ingested.original_name, ingested.media_type
        )
        return TextPart(text=f"DOCUMENT_CONTENT ({label}):\n{csv_text}\n[End of CSV content]")

    return BinaryPart(
        media_kind=ingested.media_type,
        payload=ingested.encoded_payload,
        filename=ingested.original_name,
    )


def to_prompt_parts(files_with_labels: List[Tuple[IngestedFile, str]]) -> List[PromptPart]:
    """Normalize several files on a thread pool, preserving input order"""
    if not files_with_labels:
        return []

    workers = min(NORMALIZE_WORKERS, len(files_with_labels))
    with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        return list(executor.map(lambda item: to_prompt_part(*item), files_with_labels))
