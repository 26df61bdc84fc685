from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    ai_provider: str = "gemini"

    gemini_api_key: str = ""
    gemini_extraction_model_name: str = "gemini-2.5-flash-lite"
    gemini_chat_model_name: str = "gemini-2.5-flash"
    gemini_timeout_seconds: int = 120

    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_vision_model_name: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    groq_chat_model_name: str = "llama-3.3-70b-versatile"
    groq_timeout_seconds: int = 60

    ollama_host: str = "http://127.0.0.1:11434"
    ollama_vision_model_name: str = "llava"
    ollama_chat_model_name: str = "mistral"
    ollama_timeout_seconds: int = 300

    upload_poll_interval_seconds: float = Field(2.0, ge=0)
    upload_max_wait_seconds: float = Field(300.0, gt=0)

    chat_context_chars_cloud: int = 5000
    chat_context_chars_local: int = 3000

    max_concurrent_requests_per_provider: int = Field(4, ge=1)
