from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from aeda.audit.models import AuditRecord, DataPayload, IdentityContext, RecordType, UserRole

RecordWriter = Callable[[AuditRecord], None]


def build_record(
    record_type: RecordType,
    role: UserRole,
    subject: str,
    topic: str,
    payload: DataPayload,
    tags: Iterable[str],
    now: datetime | None = None,
) -> AuditRecord:
    """Build an AuditRecord stamped with the current UTC time.

    Tags keep their first-seen order; blanks and duplicates are dropped.
    """
    stamp = now or datetime.now(timezone.utc)
    unique_tags = tuple(dict.fromkeys(t.strip() for t in tags if t and t.strip()))
    return AuditRecord(
        record_type=record_type,
        identity_context=IdentityContext(user_role=role, subject=subject, topic=topic),
        data_payload=payload,
        search_tags=unique_tags,
        firestore_ready=True,
        timestamp=stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    )
