import threading

from aeda.audit.builder import RecordWriter, build_record
from aeda.audit.models import AuditRecord, DataPayload, RecordType, UserRole
from aeda.config.settings import Settings
from aeda.documents.models import Document
from aeda.exceptions import AedaError
from aeda.logging.logger import Log
from aeda.normalization.models import ExtractionFailure, ExtractionResult
from aeda.providers.capabilities import CAPABILITIES, ProviderId
from aeda.providers.factory import ProviderRegistry
from aeda.transport.selector import ensure_not_empty

UPLOAD_DEFAULT_SUBJECT = "General"
UPLOAD_DEFAULT_TOPIC = "Upload"
PREVIEW_CHARS = 200


class IngestionPipeline:
    """Orchestrates one document ingestion.

    Pipeline: validate -> resolve provider -> extract -> normalize -> record.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        record_writer: RecordWriter | None = None,
    ) -> None:
        self._registry = registry
        self._record_writer = record_writer

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def ingest(
        self,
        document: Document,
        provider: str | ProviderId | None = None,
        cancel_event: threading.Event | None = None,
        record_upload: bool = True,
    ) -> ExtractionResult:
        """Extract structured content from a document.

        Raises:
            AedaError: a tagged subclass for every validation, capability,
                transport, upload, configuration or backend failure.
        """
        ensure_not_empty(document)
        provider_id = self._registry.resolve_id(provider)
        adapter = self._registry.get(provider_id)
        capabilities = CAPABILITIES[provider_id]
        Log.info(
            f"Ingesting {document.name}",
            provider=provider_id.value,
            mime_type=document.mime_type,
            size_bytes=document.size,
        )

        result = adapter.extract(document, capabilities, cancel_event)
        Log.info(
            f"Ingested {document.name}: {len(result.full_extraction)} chars, "
            f"{len(result.keywords)} keywords"
        )
        if record_upload:
            self._write(self._content_upload_record(result))
        return result

    def run(
        self,
        document: Document,
        provider: str | ProviderId | None = None,
        cancel_event: threading.Event | None = None,
        record_upload: bool = True,
    ) -> ExtractionResult | ExtractionFailure:
        """Like ingest, but returns tagged errors as an ExtractionFailure value."""
        try:
            return self.ingest(document, provider, cancel_event, record_upload)
        except AedaError as exc:
            Log.error(f"Ingestion of {document.name} failed: {exc}", kind=exc.kind)
            return ExtractionFailure(kind=exc.kind, error=exc.user_message)

    def write_record(self, record: AuditRecord) -> None:
        self._write(record)

    @staticmethod
    def _content_upload_record(result: ExtractionResult) -> AuditRecord:
        return build_record(
            RecordType.CONTENT_UPLOAD,
            UserRole.TEACHER,
            result.subject or UPLOAD_DEFAULT_SUBJECT,
            result.topic or UPLOAD_DEFAULT_TOPIC,
            DataPayload(
                summary=result.summary,
                full_extraction=_preview(result.full_extraction),
            ),
            result.keywords,
        )

    def _write(self, record: AuditRecord) -> None:
        if self._record_writer is None:
            return
        try:
            self._record_writer(record)
        except Exception as exc:
            Log.error(f"Failed to write {record.record_type.value} record: {exc}")


def _preview(text: str) -> str:
    # Records store a preview only.
    return f"{text[:PREVIEW_CHARS]}..." if text else ""


def build_pipeline(
    settings: Settings,
    record_writer: RecordWriter | None = None,
) -> IngestionPipeline:
    """Build an IngestionPipeline with every configured provider."""
    return IngestionPipeline(
        registry=ProviderRegistry.from_settings(settings),
        record_writer=record_writer,
    )
