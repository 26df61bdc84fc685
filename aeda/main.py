import argparse
import json
import sys
from pathlib import Path

from aeda.config.settings import Settings
from aeda.documents.loader import DocumentLoader
from aeda.exceptions import AedaError
from aeda.logging.logger import Log
from aeda.normalization.models import ExtractionFailure
from aeda.pipeline.ingestion import build_pipeline


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build pipeline -> ingest one file -> print JSON."""
    parser = argparse.ArgumentParser(description="Extract structured content from an academic document.")
    parser.add_argument("path", type=Path, help="PDF or image file to ingest")
    parser.add_argument("--provider", default=None, help="gemini, groq or ollama")
    parser.add_argument("--mime-type", default=None, help="override the detected MIME type")
    args = parser.parse_args(argv)

    settings = Settings()
    Log.configure(settings.log_level)

    try:
        document = DocumentLoader().load(args.path, mime_type=args.mime_type)
    except FileNotFoundError as exc:
        Log.error(str(exc))
        return 2

    try:
        pipeline = build_pipeline(settings)
    except AedaError as exc:
        Log.error(f"Invalid configuration: {exc}")
        return 2

    outcome = pipeline.run(document, args.provider)
    json.dump(outcome.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 1 if isinstance(outcome, ExtractionFailure) else 0


if __name__ == "__main__":
    sys.exit(main())
