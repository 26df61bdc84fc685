from dataclasses import dataclass, replace
from enum import Enum


class FileState(str, Enum):
    UPLOADING = "uploading"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class RemoteFileHandle:
    """A document copy held by a backend during asynchronous upload."""

    remote_id: str
    uri: str
    mime_type: str
    state: FileState = FileState.UPLOADING

    def with_state(self, state: FileState) -> "RemoteFileHandle":
        return replace(self, state=state)
