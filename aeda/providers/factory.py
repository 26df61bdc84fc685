from collections.abc import Callable, Mapping
from typing import ClassVar

from aeda.clients.gemini_client_adapter import GeminiClientAdapter
from aeda.clients.ollama_client_adapter import OllamaClientAdapter
from aeda.clients.openai_client_adapter import OpenAIClientAdapter
from aeda.config.settings import Settings
from aeda.exceptions import ConfigurationMissingError, UnknownProviderError
from aeda.logging.logger import Log
from aeda.providers.base import BaseProvider
from aeda.providers.capabilities import ProviderId
from aeda.providers.gemini_provider import GeminiProvider
from aeda.providers.groq_provider import GroqProvider
from aeda.providers.ollama_provider import OllamaProvider
from aeda.transport.uploader import RemoteFileUploader


def parse_provider_id(selector: str | ProviderId) -> ProviderId:
    """Map a selector string to a ProviderId.

    Raises:
        UnknownProviderError: if the selector names no known backend.
    """
    if isinstance(selector, ProviderId):
        return selector
    try:
        return ProviderId(selector.strip().lower())
    except ValueError:
        supported = [p.value for p in ProviderId]
        raise UnknownProviderError(
            f"Unknown provider '{selector}'. Choose from: {supported}"
        ) from None


class ProviderFactory:
    """Creates configured provider adapters from settings."""

    @classmethod
    def create(cls, provider_id: ProviderId, settings: Settings) -> BaseProvider:
        """Build the adapter for one backend.

        Raises:
            ConfigurationMissingError: if the backend's credential is not set.
        """
        builders: dict[ProviderId, Callable[[Settings], BaseProvider]] = {
            ProviderId.GEMINI: cls._create_gemini,
            ProviderId.GROQ: cls._create_groq,
            ProviderId.OLLAMA: cls._create_ollama,
        }
        return builders[provider_id](settings)

    @classmethod
    def _create_gemini(cls, settings: Settings) -> GeminiProvider:
        api_key = cls._require(settings.gemini_api_key, "GEMINI_API_KEY", ProviderId.GEMINI)
        client = GeminiClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.gemini_timeout_seconds,
        )
        uploader = RemoteFileUploader(
            client,
            poll_interval_seconds=settings.upload_poll_interval_seconds,
            max_wait_seconds=settings.upload_max_wait_seconds,
        )
        return GeminiProvider(
            client=client,
            uploader=uploader,
            extraction_model=settings.gemini_extraction_model_name,
            chat_model=settings.gemini_chat_model_name,
            max_concurrent_requests=settings.max_concurrent_requests_per_provider,
            secrets=[api_key],
        )

    @classmethod
    def _create_groq(cls, settings: Settings) -> GroqProvider:
        api_key = cls._require(settings.groq_api_key, "GROQ_API_KEY", ProviderId.GROQ)
        client = OpenAIClientAdapter(
            backend=ProviderId.GROQ.value,
            api_key=api_key,
            timeout_seconds=settings.groq_timeout_seconds,
            base_url=settings.groq_base_url,
        )
        return GroqProvider(
            client=client,
            vision_model=settings.groq_vision_model_name,
            chat_model=settings.groq_chat_model_name,
            max_concurrent_requests=settings.max_concurrent_requests_per_provider,
            secrets=[api_key],
        )

    @classmethod
    def _create_ollama(cls, settings: Settings) -> OllamaProvider:
        client = OllamaClientAdapter(
            host=settings.ollama_host,
            timeout_seconds=settings.ollama_timeout_seconds,
        )
        return OllamaProvider(
            client=client,
            vision_model=settings.ollama_vision_model_name,
            chat_model=settings.ollama_chat_model_name,
            max_concurrent_requests=settings.max_concurrent_requests_per_provider,
        )

    @staticmethod
    def _require(value: str, env_name: str, provider_id: ProviderId) -> str:
        value = value.strip()
        if not value:
            raise ConfigurationMissingError(
                f"{env_name} is not set; it is required for provider '{provider_id.value}'"
            )
        return value


class ProviderRegistry:
    """Resolves a caller's provider selector to a ready adapter."""

    DEFAULT_PROVIDER: ClassVar[ProviderId] = ProviderId.GEMINI

    def __init__(
        self,
        providers: Mapping[ProviderId, BaseProvider],
        *,
        default: ProviderId | None = None,
        unavailable: Mapping[ProviderId, str] | None = None,
    ) -> None:
        self._providers = dict(providers)
        self._default = default or self.DEFAULT_PROVIDER
        self._unavailable = dict(unavailable or {})

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        """Build every backend whose configuration is complete.

        Backends missing a credential are remembered and reported when selected.
        """
        default = parse_provider_id(settings.ai_provider or cls.DEFAULT_PROVIDER)
        providers: dict[ProviderId, BaseProvider] = {}
        unavailable: dict[ProviderId, str] = {}
        for provider_id in ProviderId:
            try:
                providers[provider_id] = ProviderFactory.create(provider_id, settings)
            except ConfigurationMissingError as exc:
                Log.warning(f"Provider '{provider_id.value}' unavailable: {exc}")
                unavailable[provider_id] = str(exc)
        return cls(providers, default=default, unavailable=unavailable)

    def resolve_id(self, selector: str | ProviderId | None) -> ProviderId:
        """Absent or blank selectors fall back to the default provider."""
        if selector is None or (isinstance(selector, str) and not selector.strip()):
            return self._default
        return parse_provider_id(selector)

    def get(self, selector: str | ProviderId | None) -> BaseProvider:
        """Return the adapter for a selector.

        Raises:
            UnknownProviderError: for unrecognized selectors.
            ConfigurationMissingError: if the backend lacks its credential.
        """
        provider_id = self.resolve_id(selector)
        provider = self._providers.get(provider_id)
        if provider is not None:
            return provider
        raise ConfigurationMissingError(
            self._unavailable.get(provider_id, f"Provider '{provider_id.value}' is not configured")
        )
