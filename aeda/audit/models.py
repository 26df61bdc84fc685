from dataclasses import dataclass, field
from enum import Enum


class RecordType(str, Enum):
    CONTENT_UPLOAD = "CONTENT_UPLOAD"
    QA_INTERACTION = "QA_INTERACTION"


class UserRole(str, Enum):
    TEACHER = "Teacher"
    STUDENT = "Student"


@dataclass(frozen=True)
class IdentityContext:
    user_role: UserRole
    subject: str
    topic: str


@dataclass(frozen=True)
class QAPair:
    q: str
    a: str


@dataclass(frozen=True)
class DataPayload:
    """Summary/extraction for uploads, or a question/answer pair for chat turns."""

    summary: str | None = None
    full_extraction: str | None = None
    qa_pair: QAPair | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {}
        if self.summary is not None:
            payload["summary"] = self.summary
        if self.full_extraction is not None:
            payload["full_extraction"] = self.full_extraction
        if self.qa_pair is not None:
            payload["qa_pair"] = {"q": self.qa_pair.q, "a": self.qa_pair.a}
        return payload


@dataclass(frozen=True)
class AuditRecord:
    """Event handed to the external record store after an ingestion or chat turn."""

    record_type: RecordType
    identity_context: IdentityContext
    data_payload: DataPayload
    search_tags: tuple[str, ...] = field(default_factory=tuple)
    firestore_ready: bool = True
    timestamp: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "record_type": self.record_type.value,
            "identity_context": {
                "user_role": self.identity_context.user_role.value,
                "subject": self.identity_context.subject,
                "topic": self.identity_context.topic,
            },
            "data_payload": self.data_payload.to_dict(),
            "search_tags": list(self.search_tags),
            "firestore_ready": self.firestore_ready,
            "timestamp": self.timestamp,
        }
