import json
import threading
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from aeda.chat.models import ChatTurn
from aeda.documents.models import Document
from aeda.providers.base import BaseProvider
from aeda.providers.capabilities import ProviderId

CANONICAL_RESPONSE = json.dumps({
    "summary": "s",
    "full_extraction": "text",
    "keywords": ["a", "b"],
    "subject": "Math",
    "topic": "Ch1",
})

_MIB = 1024 * 1024


class FakeProvider(BaseProvider):
    """Provider that records calls instead of reaching a backend."""

    provider_id = ProviderId.GEMINI
    display_name = "Fake"

    def __init__(
        self,
        raw_response: str = CANONICAL_RESPONSE,
        chat_response: str = "answer",
        error: Exception | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.raw_response = raw_response
        self.chat_response = chat_response
        self.error = error
        self.inline_calls: list[Document] = []
        self.uploaded_calls: list[Document] = []
        self.chat_calls: list[tuple[list[ChatTurn], str]] = []

    def _extract_inline(self, document: Document, prompt: str) -> str:
        self.inline_calls.append(document)
        if self.error is not None:
            raise self.error
        return self.raw_response

    def _extract_uploaded(
        self,
        document: Document,
        prompt: str,
        cancel_event: threading.Event | None,
    ) -> str:
        self.uploaded_calls.append(document)
        with self._backend_call():
            if self.error is not None:
                raise self.error
            return self.raw_response

    def _chat(self, prior_turns: Sequence[ChatTurn], prompt: str) -> str:
        self.chat_calls.append((list(prior_turns), prompt))
        if self.error is not None:
            raise self.error
        return self.chat_response


class FakeGroqProvider(FakeProvider):
    provider_id = ProviderId.GROQ


class FakeOllamaProvider(FakeProvider):
    provider_id = ProviderId.OLLAMA


_FAKES: dict[ProviderId, type[FakeProvider]] = {
    ProviderId.GEMINI: FakeProvider,
    ProviderId.GROQ: FakeGroqProvider,
    ProviderId.OLLAMA: FakeOllamaProvider,
}


@pytest.fixture()
def make_provider() -> Callable[..., FakeProvider]:
    """Factory for fake providers keyed by backend id."""

    def _make(provider_id: ProviderId = ProviderId.GEMINI, **kwargs: Any) -> FakeProvider:
        return _FAKES[provider_id](**kwargs)

    return _make


@pytest.fixture()
def pdf_document() -> Document:
    return Document(content=b"%PDF-1.4\n%test\n", mime_type="application/pdf", name="notes.pdf")


@pytest.fixture()
def image_document() -> Document:
    return Document(content=b"\x89PNG\r\n\x1a\nfake", mime_type="image/png", name="board.png")


@pytest.fixture()
def empty_document() -> Document:
    return Document(content=b"", mime_type="application/pdf", name="empty.pdf")


@pytest.fixture()
def sized_pdf() -> Callable[[int], Document]:
    """Build a PDF document of roughly the given size in MiB."""

    def _make(size_mb: int) -> Document:
        return Document(
            content=b"%PDF" + b"\0" * (size_mb * _MIB - 4),
            mime_type="application/pdf",
            name=f"book_{size_mb}mb.pdf",
        )

    return _make
