from pathlib import Path

from aeda.exceptions import ConfigurationMissingError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

EXTRACTION_PROMPT = "extraction_prompt.txt"
CHAT_PROMPT = "chat_prompt.txt"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt template by file name.

    Args:
        name: Template file name, e.g. extraction_prompt.txt.
        prompt_dir: Directory to read from. Defaults to the bundled prompts/.

    Returns:
        The raw template string with str.format placeholders.

    Raises:
        ConfigurationMissingError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationMissingError(f"Failed to load prompt template {name}: {exc}") from exc
