from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractionResult:
    """Canonical structured output of one ingestion."""

    summary: str = ""
    full_extraction: str = ""
    keywords: tuple[str, ...] = field(default_factory=tuple)
    subject: str = ""
    topic: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "summary": self.summary,
            "full_extraction": self.full_extraction,
            "keywords": list(self.keywords),
            "subject": self.subject,
            "topic": self.topic,
        }


@dataclass(frozen=True)
class ExtractionFailure:
    """Error variant of an ingestion outcome."""

    kind: str
    error: str

    def to_dict(self) -> dict[str, object]:
        return {"error": self.error, "kind": self.kind}
