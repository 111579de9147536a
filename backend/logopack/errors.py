"""Error hierarchy — request-level vs. cell-level failures.

Request-level errors (invalid input, missing backend) abort the whole job.
Cell-level errors (ImageLoadError, ConversionError) are caught by the
assembler and never escalate.
"""

from __future__ import annotations


class LogoPackError(Exception):
    """Base error carrying an API code and HTTP status."""

    code = "PROCESSING_ERROR"
    status_code = 500

    def __init__(self, message: str = "", *, context: dict[str, str] | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.context = context or {}


class InvalidInputError(LogoPackError):
    code = "INVALID_SVG"
    status_code = 400


class MissingFileError(InvalidInputError):
    code = "NO_FILE"
    status_code = 400


class UnsupportedInputError(InvalidInputError):
    code = "UNSUPPORTED_INPUT"
    status_code = 415


class BackendUnavailableError(LogoPackError):
    code = "BACKEND_NOT_INSTALLED"
    status_code = 503


class ImageLoadError(LogoPackError):
    code = "IMAGE_LOAD_FAILED"
    status_code = 422


class ConversionError(LogoPackError):
    code = "CONVERSION_FAILED"
    status_code = 500


class InvalidRequestError(InvalidInputError):
    code = "INVALID_SETTINGS"
    status_code = 400


class FileTooLargeError(InvalidInputError):
    code = "FILE_TOO_LARGE"
    status_code = 413


class JobTimeoutError(LogoPackError):
    code = "TIMEOUT"
    status_code = 504
