"""
Exception types for the signage core.

Only the document extraction errors ever reach callers; the others are raised
and recovered inside the storage, configuration and cache layers.
"""

from typing import Optional


class SignageError(Exception):
    """Base class for signage core errors."""
    pass


class StorageUnavailableError(SignageError):
    """Raised by a storage backend when the persistent medium cannot be used."""
    pass


class CorruptedConfigurationError(SignageError):
    """Raised when a persisted configuration blob is malformed or incomplete."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class RemoteFetchError(SignageError):
    """Raised when a remote fetch fails."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    BAD_STATUS = "bad_status"
    PARSE = "parse"

    def __init__(self, kind: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class DocumentExtractionError(SignageError):
    """Raised when text cannot be extracted from an uploaded document."""
    pass


class OversizedDocumentError(DocumentExtractionError):
    """Raised when a document has more pages than the import limit allows."""

    def __init__(self, page_count: int, max_pages: int):
        super().__init__(
            f"PDF is too large ({page_count} pages). "
            f"Please upload a document with {max_pages} pages or fewer."
        )
        self.page_count = page_count
        self.max_pages = max_pages
