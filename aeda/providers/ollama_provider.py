from collections.abc import Sequence
from typing import Any

from aeda.chat.models import ChatTurn
from aeda.clients.ollama_client_adapter import OllamaClientAdapter
from aeda.documents.models import Document
from aeda.providers.base import BaseProvider
from aeda.providers.capabilities import ProviderId


class OllamaProvider(BaseProvider):
    """Local vision backend served by an Ollama runtime on the loopback interface."""

    provider_id = ProviderId.OLLAMA
    display_name = "Ollama (local)"
    unsupported_media_hint = (
        "The local vision model supports images (JPG/PNG) only. "
        "For PDFs, please use Gemini or convert the pages to images."
    )

    def __init__(
        self,
        *,
        client: OllamaClientAdapter,
        vision_model: str,
        chat_model: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._client = client
        self._vision_model = vision_model
        self._chat_model = chat_model

    def _extract_inline(self, document: Document, prompt: str) -> str:
        return self._client.generate(
            model=self._vision_model,
            prompt=prompt,
            images=[document.to_base64()],
            response_format="json",
        )

    def _chat(self, prior_turns: Sequence[ChatTurn], prompt: str) -> str:
        messages = self._history_messages(prior_turns)
        messages.append({"role": "user", "content": prompt})
        return self._client.chat(model=self._chat_model, messages=messages)
