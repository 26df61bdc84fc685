import base64
from dataclasses import dataclass, field

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class Document:
    """Raw document submitted for a single ingestion request."""

    content: bytes = field(repr=False)
    mime_type: str
    name: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == PDF_MIME_TYPE

    def to_base64(self) -> str:
        return base64.b64encode(self.content).decode("ascii")
