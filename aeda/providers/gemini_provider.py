import threading
from collections.abc import Sequence
from typing import Any

from google.genai import types

from aeda.chat.models import ChatRole, ChatTurn
from aeda.clients.gemini_client_adapter import GeminiClientAdapter
from aeda.documents.models import Document
from aeda.providers.base import BaseProvider
from aeda.providers.capabilities import ProviderId
from aeda.transport.uploader import RemoteFileUploader


class GeminiProvider(BaseProvider):
    """Cloud multimodal backend: PDFs and images, inline or via the Files API."""

    provider_id = ProviderId.GEMINI
    display_name = "Gemini"

    def __init__(
        self,
        *,
        client: GeminiClientAdapter,
        uploader: RemoteFileUploader,
        extraction_model: str,
        chat_model: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._client = client
        self._uploader = uploader
        self._extraction_model = extraction_model
        self._chat_model = chat_model

    def _extract_inline(self, document: Document, prompt: str) -> str:
        part = types.Part.from_bytes(data=document.content, mime_type=document.mime_type)
        return self._client.generate_content(model=self._extraction_model, contents=[prompt, part])

    def _extract_uploaded(
        self,
        document: Document,
        prompt: str,
        cancel_event: threading.Event | None,
    ) -> str:
        with self._backend_call():
            handle = self._uploader.upload(document)
        ready = self._uploader.await_ready(handle, cancel_event, request_slot=self._backend_call)
        part = types.Part.from_uri(file_uri=ready.uri, mime_type=ready.mime_type)
        with self._backend_call():
            return self._client.generate_content(model=self._extraction_model, contents=[prompt, part])

    def _chat(self, prior_turns: Sequence[ChatTurn], prompt: str) -> str:
        contents: list[object] = [
            types.Content(
                role="model" if turn.role is ChatRole.ASSISTANT else "user",
                parts=[types.Part.from_text(text=turn.content)],
            )
            for turn in prior_turns
            if turn.content
        ]
        contents.append(types.Content(role="user", parts=[types.Part.from_text(text=prompt)]))
        return self._client.generate_content(model=self._chat_model, contents=contents)
