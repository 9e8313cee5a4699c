import logging
import time
from typing import Optional, Union

import requests

from .config import AppConfig
from .errors import ConfigurationMissingError, NetworkError, TranslatorError
from .logging_config import preview
from .models import TargetLanguage, TranslationRequest, TranslationResult
from .prompts import build_system_prompt, build_user_prompt
from .providers import DEFAULT_REGISTRY, ProviderRegistry, ProviderRequest

logger = logging.getLogger(__name__)


class TranslationClient:
    """Sends one selection to the configured provider and normalises the answer.

    Configuration is read on every call, so settings saved while the app runs
    apply to the next translation. Callers on a worker thread pass a config
    snapshot taken on the GUI thread, since one QSettings instance is not safe
    to share across threads. Only one call may be in flight;
    the presenter enforces that, this class does not serialise callers.
    """

    def __init__(self, store, registry: ProviderRegistry = DEFAULT_REGISTRY,
                 session: Optional[requests.Session] = None):
        self.store = store
        self.registry = registry
        self.session = session or requests.Session()
        # Last request sent, kept for the debug log and for tests
        self.last_request: Optional[ProviderRequest] = None

    def translate(self, text: str, target_language: Union[TargetLanguage, str, None] = None,
                  preserve_format: bool = True, config: Optional[AppConfig] = None) -> TranslationResult:
        """Translate text; `config` is a snapshot taken by the caller, read from the store when omitted"""
        if config is None:
            config = AppConfig.from_store(self.store)
        if target_language is None:
            language = config.target_language
        elif isinstance(target_language, TargetLanguage):
            language = target_language
        else:
            language = TargetLanguage.resolve(target_language)

        request = TranslationRequest(text, language, preserve_format)
        try:
            translated = self._translate(request, config)
        except TranslatorError as e:
            return TranslationResult.failure(e.kind, e.message or None)

        logger.info("Translation completed (%d chars)", len(translated))
        return TranslationResult.success(translated)

    def _translate(self, request: TranslationRequest, config: AppConfig) -> str:
        provider_config = config.provider_config(self.registry)
        if not provider_config.is_complete:
            logger.info("Translation skipped: API key or provider not configured")
            raise ConfigurationMissingError()

        entry = self.registry.get(provider_config.provider_id)
        if entry is None:
            logger.error("Unknown provider '%s' in settings", provider_config.provider_id)
            raise ConfigurationMissingError(f"Unknown provider '{provider_config.provider_id}'")

        model = entry.effective_model(provider_config.model_name)
        system_prompt = build_system_prompt(request.target_language, request.preserve_format)
        user_prompt = build_user_prompt(request.source_text, request.target_language,
                                        request.preserve_format)

        provider_request = entry.build_request(
            provider_config.api_key, model, system_prompt, user_prompt,
            endpoint_template=provider_config.endpoint_template or None,
        )
        self.last_request = provider_request

        logger.info("Using provider %s (model %s, target %s)",
                    entry.provider_id, model, request.target_language.value)
        logger.debug("Source text: %s", preview(request.source_text))

        start_time = time.time()
        try:
            response = self.session.post(
                provider_request.url,
                headers=provider_request.headers,
                params=provider_request.params or None,
                json=provider_request.payload,
                timeout=config.request_timeout,
            )
        except requests.RequestException as e:
            logger.error("Network error talking to %s: %s", entry.provider_id, type(e).__name__)
            # the exception text can carry the request URL, which holds the gemini key
            raise NetworkError(f"Network error ({type(e).__name__})") from e

        logger.debug("Provider %s answered HTTP %s in %.2fs",
                     entry.provider_id, response.status_code, time.time() - start_time)
        return entry.parse_response(response.status_code, response.text)

