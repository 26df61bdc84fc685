class AedaError(Exception):
    """Base exception for all ingestion and chat errors.

    The message is short and safe to show to an end user.
    """

    kind: str = "error"

    @property
    def user_message(self) -> str:
        return str(self)


class EmptyDocumentError(AedaError):
    """Raised when a document has zero bytes."""

    kind = "empty_document"


class UnsupportedMediaTypeError(AedaError):
    """Raised when a backend cannot handle the document's MIME type."""

    kind = "unsupported_media_type"


class UnsupportedSizeError(AedaError):
    """Raised when a document exceeds the inline limit of a backend without async upload."""

    kind = "unsupported_size"


class RemoteProcessingFailedError(AedaError):
    """Raised when an uploaded file reaches the FAILED state on the backend."""

    kind = "remote_processing_failed"


class ProcessingTimeoutError(AedaError):
    """Raised when an uploaded file does not leave PROCESSING within the configured wait."""

    kind = "processing_timeout"


class IngestionCancelledError(AedaError):
    """Raised when the caller cancels an in-flight readiness poll."""

    kind = "cancelled"


class BackendCallFailedError(AedaError):
    """Raised when a backend call fails due to network, auth, quota or API errors."""

    kind = "backend_call_failed"

    def __init__(self, backend: str, message: str, status_code: int | None = None) -> None:
        self.backend = backend
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{backend} request failed{status}: {message}")


class ConfigurationMissingError(AedaError):
    """Raised when a required credential or setting is absent."""

    kind = "configuration_missing"


class UnknownProviderError(AedaError):
    """Raised when a provider selector does not name a known backend."""

    kind = "unknown_provider"
