"""Tests for the async upload state machine."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from aeda.clients.client_base import BaseRemoteFileClient
from aeda.documents.models import Document
from aeda.exceptions import (
    BackendCallFailedError,
    IngestionCancelledError,
    ProcessingTimeoutError,
    RemoteProcessingFailedError,
)
from aeda.transport.models import FileState, RemoteFileHandle
from aeda.transport.uploader import RemoteFileUploader


def _handle(state: FileState) -> RemoteFileHandle:
    return RemoteFileHandle(
        remote_id="files/abc",
        uri="https://files.example/abc",
        mime_type="application/pdf",
        state=state,
    )


class RecordingFileClient(BaseRemoteFileClient):
    """Captures the temp path and whether it existed during the transfer."""

    def __init__(self, states: list[FileState], upload_error: Exception | None = None) -> None:
        self.states = states
        self.upload_error = upload_error
        self.uploaded_path: Path | None = None
        self.existed_during_upload = False
        self.uploaded_bytes = b""
        self.get_calls = 0

    def upload_file(self, path: Path, *, mime_type: str, display_name: str) -> RemoteFileHandle:
        self.uploaded_path = path
        self.existed_during_upload = path.exists()
        self.uploaded_bytes = path.read_bytes()
        if self.upload_error is not None:
            raise self.upload_error
        return _handle(FileState.UPLOADING)

    def get_file(self, remote_id: str) -> RemoteFileHandle:
        state = self.states[min(self.get_calls, len(self.states) - 1)]
        self.get_calls += 1
        return _handle(state)


@pytest.fixture()
def document() -> Document:
    return Document(content=b"%PDF large", mime_type="application/pdf", name="big.pdf")


class TestUpload:
    def test_returns_processing_handle(self, document: Document) -> None:
        client = RecordingFileClient([FileState.READY])
        handle = RemoteFileUploader(client).upload(document)
        assert handle.state is FileState.PROCESSING
        assert handle.remote_id == "files/abc"

    def test_transfers_document_bytes(self, document: Document) -> None:
        client = RecordingFileClient([FileState.READY])
        RemoteFileUploader(client).upload(document)
        assert client.existed_during_upload
        assert client.uploaded_bytes == b"%PDF large"

    def test_temp_copy_removed_after_success(self, document: Document) -> None:
        client = RecordingFileClient([FileState.READY])
        RemoteFileUploader(client).upload(document)
        assert client.uploaded_path is not None
        assert not client.uploaded_path.exists()

    def test_temp_copy_removed_after_failure(self, document: Document) -> None:
        client = RecordingFileClient(
            [FileState.READY],
            upload_error=BackendCallFailedError("gemini", "boom"),
        )
        with pytest.raises(BackendCallFailedError):
            RemoteFileUploader(client).upload(document)
        assert client.uploaded_path is not None
        assert not client.uploaded_path.exists()

    def test_keeps_ready_state_from_backend(self, document: Document) -> None:
        client = MagicMock(spec=BaseRemoteFileClient)
        client.upload_file.return_value = _handle(FileState.READY)
        handle = RemoteFileUploader(client).upload(document)
        assert handle.state is FileState.READY


class TestAwaitReady:
    def test_polls_until_ready(self) -> None:
        client = RecordingFileClient([FileState.PROCESSING, FileState.PROCESSING, FileState.READY])
        uploader = RemoteFileUploader(client, poll_interval_seconds=0)
        ready = uploader.await_ready(_handle(FileState.PROCESSING))
        assert ready.state is FileState.READY
        assert client.get_calls == 3

    def test_ready_handle_needs_no_poll(self) -> None:
        client = RecordingFileClient([FileState.READY])
        ready = RemoteFileUploader(client).await_ready(_handle(FileState.READY))
        assert ready.state is FileState.READY
        assert client.get_calls == 0

    def test_failed_state_raises(self) -> None:
        client = RecordingFileClient([FileState.PROCESSING, FileState.FAILED])
        uploader = RemoteFileUploader(client, poll_interval_seconds=0)
        with pytest.raises(RemoteProcessingFailedError):
            uploader.await_ready(_handle(FileState.PROCESSING))
        assert client.get_calls == 2

    def test_timeout_raises(self) -> None:
        ticks = iter([0.0, 1.0, 2.0, 11.0])
        client = RecordingFileClient([FileState.PROCESSING])
        uploader = RemoteFileUploader(
            client,
            poll_interval_seconds=0,
            max_wait_seconds=10,
            clock=lambda: next(ticks),
        )
        with pytest.raises(ProcessingTimeoutError, match="still processing"):
            uploader.await_ready(_handle(FileState.PROCESSING))
        assert client.get_calls == 3

    def test_cancel_stops_polling(self) -> None:
        client = RecordingFileClient([FileState.PROCESSING])
        cancel = threading.Event()
        cancel.set()
        uploader = RemoteFileUploader(client, poll_interval_seconds=5)
        with pytest.raises(IngestionCancelledError):
            uploader.await_ready(_handle(FileState.PROCESSING), cancel_event=cancel)
        assert client.get_calls == 1

    def test_checks_state_before_first_wait(self) -> None:
        client = RecordingFileClient([FileState.READY])
        cancel = threading.Event()
        cancel.set()
        uploader = RemoteFileUploader(client, poll_interval_seconds=60)
        ready = uploader.await_ready(_handle(FileState.PROCESSING), cancel_event=cancel)
        assert ready.state is FileState.READY
        assert client.get_calls == 1

    def test_slot_held_only_during_status_requests(self) -> None:
        client = RecordingFileClient([FileState.PROCESSING, FileState.PROCESSING, FileState.READY])
        held: list[bool] = []
        in_slot = False

        @contextmanager
        def _slot() -> Iterator[None]:
            nonlocal in_slot
            in_slot = True
            try:
                yield
            finally:
                in_slot = False

        original_get = client.get_file

        def _get_file(remote_id: str) -> RemoteFileHandle:
            held.append(in_slot)
            return original_get(remote_id)

        client.get_file = _get_file  # type: ignore[method-assign]
        cancel = MagicMock(spec=threading.Event)
        cancel.wait.side_effect = lambda timeout: held.append(in_slot) or False

        uploader = RemoteFileUploader(client, poll_interval_seconds=0)
        uploader.await_ready(_handle(FileState.PROCESSING), cancel_event=cancel, request_slot=_slot)

        # get, wait, get, wait, get
        assert held == [True, False, True, False, True]
