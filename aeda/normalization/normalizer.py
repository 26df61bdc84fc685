"""Turns raw backend output into an ExtractionResult."""

import json
from typing import Any

from aeda.logging.logger import Log
from aeda.normalization.models import ExtractionResult

FALLBACK_SUMMARY = "Extracted Content"
FALLBACK_KEYWORDS = ("Document", "General")
FALLBACK_SUBJECT = "General"


class ResultNormalizer:
    """Best-effort JSON extraction with a deterministic fallback.

    Never raises and performs no I/O: a backend that ignores the requested
    output format still yields a usable result.
    """

    def normalize(self, raw_text: str, file_name: str) -> ExtractionResult:
        parsed = self._parse_embedded_object(raw_text)
        if parsed is not None:
            return self._build(parsed)
        Log.warning(f"Response for {file_name} has no JSON object, using raw text")
        return self.fallback(raw_text, file_name)

    @staticmethod
    def fallback(raw_text: str, file_name: str) -> ExtractionResult:
        return ExtractionResult(
            summary=FALLBACK_SUMMARY,
            full_extraction=raw_text,
            keywords=FALLBACK_KEYWORDS,
            subject=FALLBACK_SUBJECT,
            topic=file_name,
        )

    @staticmethod
    def _parse_embedded_object(raw_text: str) -> dict[str, Any] | None:
        # First "{" through last "}": tolerates prose and code fences around the object.
        start = raw_text.find("{")
        end = raw_text.rfind("}")
        if start == -1 or end < start:
            return None
        try:
            parsed = json.loads(raw_text[start : end + 1])
        except json.JSONDecodeError:
            return None
        return parsed if isinstance(parsed, dict) else None

    @staticmethod
    def _build(data: dict[str, Any]) -> ExtractionResult:
        return ExtractionResult(
            summary=_as_text(data.get("summary")),
            full_extraction=_as_text(data.get("full_extraction")),
            keywords=_as_keywords(data.get("keywords")),
            subject=_as_text(data.get("subject")),
            topic=_as_text(data.get("topic")),
        )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _as_keywords(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        # "a, b" from models that ignore the list type
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, list):
        return tuple(text for text in map(_as_text, value) if text)
    return (_as_text(value),)
