"""
Error taxonomy shared by services and controllers.

Each error carries the HTTP status the API answers with, so controllers can
turn any ``ReaderError`` into a JSON error response without a lookup table.
"""


class ReaderError(Exception):
    """Base class for expected, user-presentable failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReaderError):
    """Malformed or out-of-range input. The caller's fault, never retried."""

    status_code = 400


class NotFoundError(ReaderError):
    """The referenced entity does not exist."""

    status_code = 404


class DuplicateError(ReaderError):
    """A card with the same case-insensitive Polish form already exists."""

    status_code = 409


class ExtractionFormatError(ReaderError):
    """The AI backend answered with content that does not match the expected shape."""

    status_code = 502

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response[:500]


class ExtractionUnavailableError(ReaderError):
    """The AI backend could not be reached or rejected the request."""

    status_code = 503


class StoreError(ReaderError):
    """The card store failed to write; aborts the rest of a bulk operation."""

    status_code = 500
