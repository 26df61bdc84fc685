from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from aeda.documents.models import Document


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatTurn:
    """One message in a conversation."""

    role: ChatRole
    content: str
    attachment: Document | None = None


ChatSession = Sequence[ChatTurn]
