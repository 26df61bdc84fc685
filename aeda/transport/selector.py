from enum import Enum

from aeda.documents.models import Document
from aeda.exceptions import EmptyDocumentError, UnsupportedSizeError
from aeda.providers.capabilities import ProviderCapabilities


class Transport(str, Enum):
    INLINE = "inline"
    ASYNC_UPLOAD = "async_upload"


def ensure_not_empty(document: Document) -> None:
    if document.size == 0:
        raise EmptyDocumentError(f"File '{document.name}' is empty (0 bytes)")


def select_transport(document: Document, capabilities: ProviderCapabilities) -> Transport:
    """Choose how document bytes reach the backend.

    Raises:
        EmptyDocumentError: if the document has no bytes.
        UnsupportedSizeError: if the document is over the inline limit and the
            backend has no async upload path.
    """
    ensure_not_empty(document)
    if capabilities.inline_payload_size(document.size) <= capabilities.inline_byte_limit:
        return Transport.INLINE
    if capabilities.supports_async_upload:
        return Transport.ASYNC_UPLOAD
    limit_mb = capabilities.inline_byte_limit / (1024 * 1024)
    encoded = " once base64-encoded" if capabilities.limit_counts_base64 else ""
    raise UnsupportedSizeError(
        f"File '{document.name}' is {document.size / (1024 * 1024):.2f} MB, "
        f"over the {limit_mb:.0f} MB limit of this provider{encoded}"
    )
