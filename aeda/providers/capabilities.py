import math
from dataclasses import dataclass
from enum import Enum

from aeda.documents.models import PDF_MIME_TYPE

_MIB = 1024 * 1024

IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"})


class ProviderId(str, Enum):
    GEMINI = "gemini"
    GROQ = "groq"
    OLLAMA = "ollama"


@dataclass(frozen=True)
class ProviderCapabilities:
    """Static description of what a backend accepts."""

    supports_pdf: bool
    supports_async_upload: bool
    inline_byte_limit: int
    supported_mime_types: frozenset[str]
    is_local: bool = False
    limit_counts_base64: bool = False

    def inline_payload_size(self, byte_size: int) -> int:
        """Size the backend measures against inline_byte_limit."""
        if self.limit_counts_base64:
            return 4 * math.ceil(byte_size / 3)
        return byte_size

    def accepts(self, mime_type: str) -> bool:
        if mime_type == PDF_MIME_TYPE:
            return self.supports_pdf
        return mime_type in self.supported_mime_types


# Gemini caps inline requests at 20 MiB; 18 MiB leaves room for the prompt
# and base64 overhead. Groq caps the base64-encoded image at 4 MiB.
CAPABILITIES: dict[ProviderId, ProviderCapabilities] = {
    ProviderId.GEMINI: ProviderCapabilities(
        supports_pdf=True,
        supports_async_upload=True,
        inline_byte_limit=18 * _MIB,
        supported_mime_types=IMAGE_MIME_TYPES | {PDF_MIME_TYPE},
    ),
    ProviderId.GROQ: ProviderCapabilities(
        supports_pdf=False,
        supports_async_upload=False,
        inline_byte_limit=4 * _MIB,
        supported_mime_types=IMAGE_MIME_TYPES,
        limit_counts_base64=True,
    ),
    ProviderId.OLLAMA: ProviderCapabilities(
        supports_pdf=False,
        supports_async_upload=False,
        inline_byte_limit=20 * _MIB,
        supported_mime_types=IMAGE_MIME_TYPES,
        is_local=True,
    ),
}
