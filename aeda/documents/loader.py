import mimetypes
from pathlib import Path

from aeda.documents.models import Document

DEFAULT_MIME_TYPE = "application/octet-stream"


class DocumentLoader:
    """Reads a file from disk into a Document, detecting its MIME type."""

    def load(self, path: Path, mime_type: str | None = None) -> Document:
        """Read document bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist.
        """
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return Document(
            content=path.read_bytes(),
            mime_type=mime_type or self._guess_mime_type(path),
            name=path.name,
        )

    @staticmethod
    def _guess_mime_type(path: Path) -> str:
        guessed, _ = mimetypes.guess_type(path.name)
        return guessed or DEFAULT_MIME_TYPE
