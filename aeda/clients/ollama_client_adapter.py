from collections.abc import Iterator
from contextlib import contextmanager

import httpx
import ollama

from aeda.exceptions import BackendCallFailedError

_BACKEND = "ollama"


class OllamaClientAdapter:
    """Wraps ollama.Client for a local Ollama runtime.

    Extra httpx options (transport) are passed through to the underlying
    httpx.Client.
    """

    def __init__(
        self,
        *,
        host: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = ollama.Client(
            host=host.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    def generate(
        self,
        *,
        model: str,
        prompt: str,
        images: list[str] | None = None,
        response_format: str | None = None,
    ) -> str:
        """Single-shot generation; images are base64 strings."""
        with _translate_errors(model):
            response = self._client.generate(
                model=model,
                prompt=prompt,
                images=images or None,
                format=response_format,
                stream=False,
            )
        if not response.response:
            raise BackendCallFailedError(_BACKEND, "empty response")
        return response.response

    def chat(self, *, model: str, messages: list[dict[str, str]]) -> str:
        with _translate_errors(model):
            response = self._client.chat(model=model, messages=messages, stream=False)
        content = response.message.content if response.message else None
        if not content:
            raise BackendCallFailedError(_BACKEND, "empty response")
        return content


@contextmanager
def _translate_errors(model: str) -> Iterator[None]:
    try:
        yield
    except ollama.ResponseError as exc:
        raise BackendCallFailedError(
            _BACKEND,
            f"{exc.error}. Ensure 'ollama pull {model}' has been run",
            exc.status_code,
        ) from exc
    except (ConnectionError, httpx.HTTPError) as exc:
        raise BackendCallFailedError(_BACKEND, f"network error: {exc}") from exc
    except ValueError as exc:
        raise BackendCallFailedError(_BACKEND, f"invalid response body: {exc}") from exc
