"""Grounded tutoring chat over an uploaded document."""

import threading

from aeda.audit.builder import build_record
from aeda.audit.models import DataPayload, QAPair, RecordType, UserRole
from aeda.chat.models import ChatSession
from aeda.config.settings import Settings
from aeda.documents.models import Document
from aeda.exceptions import AedaError
from aeda.logging.logger import Log
from aeda.normalization.models import ExtractionResult
from aeda.pipeline.ingestion import IngestionPipeline
from aeda.providers.capabilities import CAPABILITIES, ProviderId
from aeda.providers.prompt_loader import CHAT_PROMPT, load_prompt_template

CHAT_FALLBACK_MESSAGE = (
    "I'm having trouble connecting to my brain right now. Please check my API Key setup."
)

QA_SUBJECT = "StudentDoubt"
QA_TOPIC = "Direct Upload"
QA_TAGS = ("student-upload",)


class ChatOrchestrator:
    """Builds a context-grounded prompt and dispatches it to the selected provider."""

    def __init__(
        self,
        pipeline: IngestionPipeline,
        *,
        cloud_context_chars: int = 5000,
        local_context_chars: int = 3000,
    ) -> None:
        self._pipeline = pipeline
        self._cloud_context_chars = cloud_context_chars
        self._local_context_chars = local_context_chars
        self._template = load_prompt_template(CHAT_PROMPT)

    def answer(
        self,
        session: ChatSession,
        new_message: str,
        document_context: str = "",
        provider: str | ProviderId | None = None,
        attachment: Document | None = None,
        cancel_event: threading.Event | None = None,
    ) -> str:
        """Answer one student message.

        Never raises for provider failures: the caller gets CHAT_FALLBACK_MESSAGE.
        """
        try:
            provider_id = self._pipeline.registry.resolve_id(provider)
            question = new_message
            if attachment is not None:
                question = self._attachment_question(attachment, new_message, provider_id, cancel_event)

            prompt = self.build_prompt(question, document_context, provider_id)
            Log.debug(f"Chat prompt:\n{prompt}")
            adapter = self._pipeline.registry.get(provider_id)
            answer = adapter.chat(list(session), prompt)
        except AedaError as exc:
            Log.error(f"Chat turn failed: {exc}", kind=exc.kind)
            return CHAT_FALLBACK_MESSAGE

        Log.info(f"Chat answered: {len(answer)} chars", provider=provider_id.value)
        self._pipeline.write_record(
            build_record(
                RecordType.QA_INTERACTION,
                UserRole.STUDENT,
                QA_SUBJECT,
                QA_TOPIC,
                DataPayload(qa_pair=QAPair(q=question, a=answer)),
                QA_TAGS,
            )
        )
        return answer

    def build_prompt(self, question: str, document_context: str, provider_id: ProviderId) -> str:
        # Hard character cut; local models get a smaller window.
        budget = (
            self._local_context_chars
            if CAPABILITIES[provider_id].is_local
            else self._cloud_context_chars
        )
        return self._template.format(context=document_context[:budget], question=question)

    def _attachment_question(
        self,
        attachment: Document,
        new_message: str,
        provider_id: ProviderId,
        cancel_event: threading.Event | None,
    ) -> str:
        outcome = self._pipeline.run(attachment, provider_id, cancel_event, record_upload=False)
        if isinstance(outcome, ExtractionResult) and outcome.full_extraction:
            return (
                f"[User attached a file named {attachment.name}. "
                f"Content: {outcome.full_extraction}]\n\nQuestion: {new_message}"
            )
        return f"[User attached a file {attachment.name} but processing failed]. Question: {new_message}"


def build_chat_orchestrator(settings: Settings, pipeline: IngestionPipeline) -> ChatOrchestrator:
    """Build a ChatOrchestrator sharing the pipeline's providers and record writer."""
    return ChatOrchestrator(
        pipeline,
        cloud_context_chars=settings.chat_context_chars_cloud,
        local_context_chars=settings.chat_context_chars_local,
    )
