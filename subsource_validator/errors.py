"""
Error taxonomy for the validation workflow
"""


class SubsourceError(Exception):
    """Base class for every failure surfaced by the validator"""
    status_code = 500


class CredentialMissingError(SubsourceError):
    """No API key configured for the generation service"""
    status_code = 503


class UnsupportedTypeError(SubsourceError):
    status_code = 415

    def __init__(self, filename: str, media_type: str):
        self.filename = filename
        self.media_type = media_type
        super().__init__(
            f"Unsupported file type: {media_type or 'unknown'} ({filename}). "
            "Please upload PDF, Images, or Excel files."
        )


class DocumentParseError(SubsourceError):
    status_code = 422

    def __init__(self, filename: str, reason: str = ""):
        self.filename = filename
        message = f"Failed to read Excel file: {filename}. Please ensure it is a valid .xlsx file."
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InputValidationError(SubsourceError):
    """Missing master list, empty datasheet set or empty upload"""
    status_code = 400


class IngestionError(SubsourceError):
    status_code = 400


class ExtractionError(SubsourceError):
    """Remote call failed or the response could not be decoded"""
    status_code = 502


class SchemaMismatchError(ExtractionError):
    """Decoded response does not match the declared result shape"""


class InvalidTransitionError(SubsourceError):
    status_code = 409
