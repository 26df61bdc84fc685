import httpx
import openai

from aeda.exceptions import BackendCallFailedError


class OpenAIClientAdapter:
    """Chat client for OpenAI-compatible APIs (used for Groq)."""

    def __init__(
        self,
        *,
        backend: str,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._backend = backend
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=messages,  # type: ignore[arg-type]
                stream=False,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise BackendCallFailedError(self._backend, f"network error: {exc}") from exc
        except openai.APIStatusError as exc:
            raise BackendCallFailedError(
                self._backend, f"API error: {exc.message}", exc.status_code
            ) from exc
        except openai.APIError as exc:
            raise BackendCallFailedError(self._backend, f"API error: {exc.message}") from exc

        if not response.choices:
            raise BackendCallFailedError(self._backend, "no choices returned")
        content = response.choices[0].message.content
        if content is None:
            raise BackendCallFailedError(self._backend, "empty response")
        return content
