"""Asynchronous large-file upload with readiness polling."""

import tempfile
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from pathlib import Path

from aeda.clients.client_base import BaseRemoteFileClient
from aeda.documents.models import Document
from aeda.exceptions import (
    IngestionCancelledError,
    ProcessingTimeoutError,
    RemoteProcessingFailedError,
)
from aeda.logging.logger import Log
from aeda.transport.models import FileState, RemoteFileHandle

_PENDING = (FileState.UPLOADING, FileState.PROCESSING)


class RemoteFileUploader:
    """Uploads one document through a temp file and waits until the backend is done with it.

    States: UPLOADING -> PROCESSING -> READY | FAILED.
    """

    def __init__(
        self,
        client: BaseRemoteFileClient,
        *,
        poll_interval_seconds: float = 2.0,
        max_wait_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._poll_interval = poll_interval_seconds
        self._max_wait = max_wait_seconds
        self._clock = clock

    def upload(self, document: Document) -> RemoteFileHandle:
        """Transfer the document and return a handle in PROCESSING (or later) state.

        The local temporary copy is deleted before returning, on every path.
        """
        temp_path = self._write_temp_copy(document)
        Log.info(f"Uploading {document.name} via file API", size_bytes=document.size)
        try:
            handle = self._client.upload_file(
                temp_path,
                mime_type=document.mime_type,
                display_name=document.name,
            )
        finally:
            temp_path.unlink(missing_ok=True)
            Log.debug(f"Removed temporary copy {temp_path}")

        if handle.state == FileState.UPLOADING:
            handle = handle.with_state(FileState.PROCESSING)
        Log.info(f"Uploaded {document.name}", remote_id=handle.remote_id, state=handle.state.value)
        return handle

    def await_ready(
        self,
        handle: RemoteFileHandle,
        cancel_event: threading.Event | None = None,
        request_slot: Callable[[], AbstractContextManager[object]] = nullcontext,
    ) -> RemoteFileHandle:
        """Poll the backend until the file leaves PROCESSING.

        The state is checked once right away, then every poll interval.
        request_slot wraps each status request only; nothing is held while
        sleeping between polls.

        Raises:
            RemoteProcessingFailedError: if the backend reports FAILED.
            ProcessingTimeoutError: if max_wait_seconds elapses first.
            IngestionCancelledError: if cancel_event is set while waiting.
        """
        cancel_event = cancel_event or threading.Event()
        deadline = self._clock() + self._max_wait
        current = handle
        if current.state in _PENDING:
            current = self._fetch(handle.remote_id, request_slot)
        while current.state in _PENDING:
            if self._clock() >= deadline:
                raise ProcessingTimeoutError(
                    f"Remote file {handle.remote_id} still processing "
                    f"after {self._max_wait:.0f}s"
                )
            Log.debug(f"Remote file {handle.remote_id} is processing")
            if cancel_event.wait(self._poll_interval):
                raise IngestionCancelledError(
                    f"Waiting for remote file {handle.remote_id} was cancelled"
                )
            current = self._fetch(handle.remote_id, request_slot)

        if current.state == FileState.FAILED:
            raise RemoteProcessingFailedError(
                f"The provider failed to process remote file {handle.remote_id}"
            )
        Log.info(f"Remote file {handle.remote_id} is ready")
        return current

    def _fetch(
        self,
        remote_id: str,
        request_slot: Callable[[], AbstractContextManager[object]],
    ) -> RemoteFileHandle:
        with request_slot():
            return self._client.get_file(remote_id)

    @staticmethod
    def _write_temp_copy(document: Document) -> Path:
        suffix = Path(document.name).suffix
        tmp = tempfile.NamedTemporaryFile(prefix="aeda_", suffix=suffix, delete=False)
        path = Path(tmp.name)
        try:
            with tmp:
                tmp.write(document.content)
        except OSError:
            path.unlink(missing_ok=True)
            raise
        return path
