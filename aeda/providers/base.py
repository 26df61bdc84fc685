import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import ClassVar

from aeda.chat.models import ChatTurn
from aeda.documents.models import Document
from aeda.exceptions import (
    BackendCallFailedError,
    UnsupportedMediaTypeError,
    UnsupportedSizeError,
)
from aeda.logging.logger import Log
from aeda.normalization.models import ExtractionResult
from aeda.normalization.normalizer import ResultNormalizer
from aeda.providers.capabilities import CAPABILITIES, ProviderCapabilities, ProviderId
from aeda.providers.prompt_loader import EXTRACTION_PROMPT, load_prompt_template
from aeda.transport.selector import Transport, ensure_not_empty, select_transport

_REDACTED = "***"


class BaseProvider(ABC):
    """Contract for all backend adapters.

    Subclasses implement the raw backend calls; gating, transport selection,
    concurrency limiting, credential redaction and normalization live here.
    """

    provider_id: ClassVar[ProviderId]
    display_name: ClassVar[str]
    unsupported_media_hint: ClassVar[str] = ""

    def __init__(
        self,
        *,
        normalizer: ResultNormalizer | None = None,
        max_concurrent_requests: int = 4,
        secrets: Sequence[str] = (),
    ) -> None:
        self._normalizer = normalizer or ResultNormalizer()
        self._slots = threading.BoundedSemaphore(max_concurrent_requests)
        self._secrets = tuple(s for s in secrets if s)
        self._extraction_template = load_prompt_template(EXTRACTION_PROMPT)

    @property
    def capabilities(self) -> ProviderCapabilities:
        return CAPABILITIES[self.provider_id]

    def extract(
        self,
        document: Document,
        capabilities: ProviderCapabilities | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExtractionResult:
        """Run one extraction call and normalize the backend's answer.

        Raises:
            EmptyDocumentError, UnsupportedMediaTypeError, UnsupportedSizeError:
                before any network call.
            RemoteProcessingFailedError, ProcessingTimeoutError,
            IngestionCancelledError: during async upload.
            BackendCallFailedError: on backend failures.
        """
        capabilities = capabilities or self.capabilities
        ensure_not_empty(document)
        self._check_media_type(document, capabilities)
        transport = select_transport(document, capabilities)
        Log.info(
            f"{self.display_name}: extracting {document.name} "
            f"({document.size / (1024 * 1024):.2f} MB) via {transport.value}"
        )

        prompt = self._extraction_template.format(file_name=document.name)
        if transport is Transport.ASYNC_UPLOAD:
            raw = self._extract_uploaded(document, prompt, cancel_event)
        else:
            with self._backend_call():
                raw = self._extract_inline(document, prompt)
        Log.debug(f"{self.display_name} raw response:\n{raw}")
        return self._normalizer.normalize(raw, document.name)

    def chat(self, prior_turns: Sequence[ChatTurn], prompt: str) -> str:
        """Submit one grounded prompt after the prior turns and return the answer text."""
        with self._backend_call():
            return self._chat(prior_turns, prompt)

    @abstractmethod
    def _extract_inline(self, document: Document, prompt: str) -> str:
        """Send document bytes embedded in the request; return raw text."""

    def _extract_uploaded(
        self,
        document: Document,
        prompt: str,
        cancel_event: threading.Event | None,
    ) -> str:
        """Upload, wait for the backend, then extract; return raw text.

        Implementations take a request slot via _backend_call around each
        backend request, never across the readiness wait.
        """
        raise UnsupportedSizeError(f"{self.display_name} has no upload path for large files")

    @abstractmethod
    def _chat(self, prior_turns: Sequence[ChatTurn], prompt: str) -> str:
        """Return the backend's free-text answer."""

    @staticmethod
    def _history_messages(prior_turns: Sequence[ChatTurn]) -> list[dict[str, str]]:
        return [
            {"role": turn.role.value, "content": turn.content}
            for turn in prior_turns
            if turn.content
        ]

    def _check_media_type(self, document: Document, capabilities: ProviderCapabilities) -> None:
        if capabilities.accepts(document.mime_type):
            return
        message = f"{self.display_name} cannot process {document.mime_type} files ('{document.name}')."
        if self.unsupported_media_hint:
            message = f"{message} {self.unsupported_media_hint}"
        raise UnsupportedMediaTypeError(message)

    @contextmanager
    def _backend_call(self) -> Iterator[None]:
        with self._slots:
            try:
                yield
            except BackendCallFailedError as exc:
                exc.args = (self._redact(str(exc)),)
                raise

    def _redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, _REDACTED)
        return text
