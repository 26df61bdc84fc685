"""Tests for ChatOrchestrator."""

from aeda.audit.models import AuditRecord, RecordType, UserRole
from aeda.chat.models import ChatRole, ChatTurn
from aeda.chat.orchestrator import CHAT_FALLBACK_MESSAGE, ChatOrchestrator
from aeda.documents.models import Document
from aeda.exceptions import BackendCallFailedError
from aeda.pipeline.ingestion import IngestionPipeline
from aeda.providers.capabilities import ProviderId
from aeda.providers.factory import ProviderRegistry


def _orchestrator(providers: dict, records: list | None = None) -> ChatOrchestrator:
    writer = records.append if records is not None else None
    pipeline = IngestionPipeline(ProviderRegistry(providers), record_writer=writer)
    return ChatOrchestrator(pipeline, cloud_context_chars=20, local_context_chars=10)


class TestPrompt:
    def test_embeds_context_and_question(self, make_provider) -> None:
        provider = make_provider()
        _orchestrator({ProviderId.GEMINI: provider}).answer([], "What is F?", "F = ma")
        (_, prompt), = provider.chat_calls
        assert '"""F = ma..."""' in prompt
        assert "Student Question: What is F?" in prompt
        assert "PYQ" in prompt
        assert "Notes" in prompt
        assert "cite the document" in prompt

    def test_cloud_context_truncated(self, make_provider) -> None:
        provider = make_provider()
        _orchestrator({ProviderId.GEMINI: provider}).answer([], "q", "x" * 50)
        (_, prompt), = provider.chat_calls
        assert '"""' + "x" * 20 + '..."""' in prompt

    def test_local_context_has_smaller_budget(self, make_provider) -> None:
        provider = make_provider(ProviderId.OLLAMA)
        _orchestrator({ProviderId.OLLAMA: provider}).answer([], "q", "y" * 50, "ollama")
        (_, prompt), = provider.chat_calls
        assert '"""' + "y" * 10 + '..."""' in prompt

    def test_prior_turns_forwarded(self, make_provider) -> None:
        provider = make_provider()
        session = [ChatTurn(role=ChatRole.ASSISTANT, content="Hi!")]
        _orchestrator({ProviderId.GEMINI: provider}).answer(session, "q", "ctx")
        (turns, _), = provider.chat_calls
        assert turns == session


class TestAnswer:
    def test_returns_backend_answer_and_records(self, make_provider) -> None:
        records: list[AuditRecord] = []
        provider = make_provider(chat_response="$a^2 + b^2 = c^2$")
        answer = _orchestrator({ProviderId.GEMINI: provider}, records).answer([], "Pythagoras?", "")
        assert answer == "$a^2 + b^2 = c^2$"
        (record,) = records
        assert record.record_type is RecordType.QA_INTERACTION
        assert record.identity_context.user_role is UserRole.STUDENT
        assert record.identity_context.subject == "StudentDoubt"
        assert record.identity_context.topic == "Direct Upload"
        assert record.data_payload.qa_pair is not None
        assert record.data_payload.qa_pair.q == "Pythagoras?"
        assert record.data_payload.qa_pair.a == "$a^2 + b^2 = c^2$"
        assert record.search_tags == ("student-upload",)

    def test_backend_failure_returns_fallback(self, make_provider) -> None:
        records: list[AuditRecord] = []
        provider = make_provider(error=BackendCallFailedError("gemini", "secret internals", 500))
        answer = _orchestrator({ProviderId.GEMINI: provider}, records).answer([], "q", "ctx")
        assert answer == CHAT_FALLBACK_MESSAGE
        assert "secret internals" not in answer
        assert records == []

    def test_unknown_provider_returns_fallback(self, make_provider) -> None:
        answer = _orchestrator({ProviderId.GEMINI: make_provider()}).answer([], "q", "", "bard")
        assert answer == CHAT_FALLBACK_MESSAGE


class TestAttachment:
    def test_extracted_content_folded_into_question(self, make_provider, image_document: Document) -> None:
        records: list[AuditRecord] = []
        provider = make_provider()
        answer = _orchestrator({ProviderId.GEMINI: provider}, records).answer(
            [], "Solve it", "", attachment=image_document
        )
        assert answer == "answer"
        assert provider.inline_calls == [image_document]
        (_, prompt), = provider.chat_calls
        assert "[User attached a file named board.png. Content: text]" in prompt
        assert "Question: Solve it" in prompt
        assert [r.record_type for r in records] == [RecordType.QA_INTERACTION]

    def test_failed_attachment_still_answers(self, make_provider, pdf_document: Document) -> None:
        provider = make_provider(ProviderId.GROQ)
        answer = _orchestrator({ProviderId.GROQ: provider}).answer(
            [], "Explain", "", "groq", attachment=pdf_document
        )
        assert answer == "answer"
        (_, prompt), = provider.chat_calls
        assert "[User attached a file notes.pdf but processing failed]. Question: Explain" in prompt
