from abc import ABC, abstractmethod
from pathlib import Path

from aeda.transport.models import RemoteFileHandle


class BaseRemoteFileClient(ABC):
    """Contract for backends that accept a two-phase upload-then-reference flow."""

    @abstractmethod
    def upload_file(self, path: Path, *, mime_type: str, display_name: str) -> RemoteFileHandle:
        """Transfer a local file and return its remote handle.

        Raises:
            BackendCallFailedError: on any transfer failure.
        """

    @abstractmethod
    def get_file(self, remote_id: str) -> RemoteFileHandle:
        """Return the current remote state of an uploaded file."""
