from collections.abc import Sequence
from typing import Any

from aeda.chat.models import ChatTurn
from aeda.clients.openai_client_adapter import OpenAIClientAdapter
from aeda.documents.models import Document
from aeda.providers.base import BaseProvider
from aeda.providers.capabilities import ProviderId


class GroqProvider(BaseProvider):
    """Cloud vision-only backend reached through Groq's OpenAI-compatible API."""

    provider_id = ProviderId.GROQ
    display_name = "Groq"
    unsupported_media_hint = (
        "Groq Llama Vision handles images (JPG/PNG) only. "
        "For PDFs, use Gemini or convert the pages to images."
    )

    def __init__(
        self,
        *,
        client: OpenAIClientAdapter,
        vision_model: str,
        chat_model: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._client = client
        self._vision_model = vision_model
        self._chat_model = chat_model

    def _extract_inline(self, document: Document, prompt: str) -> str:
        data_url = f"data:{document.mime_type};base64,{document.to_base64()}"
        messages: list[dict[str, object]] = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            }
        ]
        return self._client.create_chat_completion(model=self._vision_model, messages=messages)

    def _chat(self, prior_turns: Sequence[ChatTurn], prompt: str) -> str:
        messages: list[dict[str, object]] = [*self._history_messages(prior_turns)]
        messages.append({"role": "user", "content": prompt})
        return self._client.create_chat_completion(model=self._chat_model, messages=messages)
