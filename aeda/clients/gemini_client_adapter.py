from pathlib import Path

import httpx
from google import genai
from google.genai import errors, types

from aeda.clients.client_base import BaseRemoteFileClient
from aeda.exceptions import BackendCallFailedError
from aeda.transport.models import FileState, RemoteFileHandle

_BACKEND = "gemini"

_STATES = {
    "PROCESSING": FileState.PROCESSING,
    "STATE_UNSPECIFIED": FileState.PROCESSING,
    "ACTIVE": FileState.READY,
    "FAILED": FileState.FAILED,
}


class GeminiClientAdapter(BaseRemoteFileClient):
    """google-genai client wrapper: content generation plus the Files API."""

    def __init__(self, *, api_key: str, timeout_seconds: int) -> None:
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_seconds * 1000),
        )

    def generate_content(self, *, model: str, contents: list[object]) -> str:
        try:
            response = self._client.models.generate_content(
                model=model,
                contents=contents,  # type: ignore[arg-type]
            )
        except errors.APIError as exc:
            raise BackendCallFailedError(_BACKEND, f"API error: {exc.message}", exc.code) from exc
        except httpx.HTTPError as exc:
            raise BackendCallFailedError(_BACKEND, f"network error: {exc}") from exc

        text = response.text
        if not text:
            raise BackendCallFailedError(_BACKEND, "empty response")
        return text

    def upload_file(self, path: Path, *, mime_type: str, display_name: str) -> RemoteFileHandle:
        try:
            uploaded = self._client.files.upload(
                file=str(path),
                config=types.UploadFileConfig(mime_type=mime_type, display_name=display_name),
            )
        except errors.APIError as exc:
            raise BackendCallFailedError(_BACKEND, f"upload failed: {exc.message}", exc.code) from exc
        except httpx.HTTPError as exc:
            raise BackendCallFailedError(_BACKEND, f"upload network error: {exc}") from exc
        return self._to_handle(uploaded, mime_type)

    def get_file(self, remote_id: str) -> RemoteFileHandle:
        try:
            remote = self._client.files.get(name=remote_id)
        except errors.APIError as exc:
            raise BackendCallFailedError(_BACKEND, f"file lookup failed: {exc.message}", exc.code) from exc
        except httpx.HTTPError as exc:
            raise BackendCallFailedError(_BACKEND, f"file lookup network error: {exc}") from exc
        return self._to_handle(remote, None)

    @staticmethod
    def _to_handle(remote: types.File, fallback_mime_type: str | None) -> RemoteFileHandle:
        state = remote.state
        state_name = str(getattr(state, "value", state) or "STATE_UNSPECIFIED").upper()
        return RemoteFileHandle(
            remote_id=remote.name or "",
            uri=remote.uri or "",
            mime_type=remote.mime_type or fallback_mime_type or "",
            state=_STATES.get(state_name, FileState.PROCESSING),
        )
