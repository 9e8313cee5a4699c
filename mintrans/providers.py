"""Provider registry: one entry per translation backend.

Each entry pairs an endpoint and a default model with a wire protocol. The
protocol knows how to build the HTTP request and where the translated text
lives in a success response. Adding a provider means adding an entry to
``DEFAULT_REGISTRY``; the translation client never branches on provider ids.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .errors import ProviderError, ProviderParseError
from .prompts import merged_prompt

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
MESSAGES_MAX_TOKENS = 1024


@dataclass(frozen=True)
class ProviderRequest:
    """Everything needed to issue one POST; params end up in the query string"""
    url: str
    headers: Dict[str, str]
    payload: Dict[str, Any]
    params: Dict[str, str] = field(default_factory=dict)


class ProviderProtocol(ABC):
    """A request/response wire shape shared by one or more providers"""

    name = "abstract"

    @abstractmethod
    def build_request(self, url: str, api_key: str, model: str,
                      system_prompt: str, user_prompt: str) -> ProviderRequest:
        """Build the request for one translation."""

    @abstractmethod
    def extract_text(self, data: Any) -> Any:
        """Follow the success field path; may raise KeyError/IndexError/TypeError."""

    def parse_response(self, status: int, body: str, fallback_error: str) -> str:
        """Return the trimmed translated text or raise a provider exception"""
        if status != 200:
            message = _error_message(body) or fallback_error
            logger.warning("Provider returned HTTP %s: %s", status, message)
            raise ProviderError(message, status=status)

        try:
            data = json.loads(body)
        except (TypeError, ValueError) as e:
            raise ProviderParseError(f"Invalid JSON in response: {e}") from e

        try:
            text = self.extract_text(data)
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderParseError(f"{fallback_error}: unexpected response shape") from e

        if not isinstance(text, str):
            raise ProviderParseError(f"{fallback_error}: unexpected response shape")
        return text.strip()


def _error_message(body: str) -> Optional[str]:
    """Pull error.message out of an error body when there is one"""
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class ChatCompletionsProtocol(ProviderProtocol):
    """OpenAI-style chat completions: bearer token, system and user roles"""

    name = "chat-completions"

    def build_request(self, url, api_key, model, system_prompt, user_prompt):
        return ProviderRequest(
            url=url,
            headers={"Authorization": f"Bearer {api_key}"},
            payload={
                "model": model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            },
        )

    def extract_text(self, data):
        return data["choices"][0]["message"]["content"]


class MessagesProtocol(ProviderProtocol):
    """Anthropic messages API: secret header, top-level system field"""

    name = "messages"

    def build_request(self, url, api_key, model, system_prompt, user_prompt):
        return ProviderRequest(
            url=url,
            headers={
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            payload={
                "model": model,
                "system": system_prompt,
                "messages": [{"role": "user", "content": user_prompt}],
                "max_tokens": MESSAGES_MAX_TOKENS,
            },
        )

    def extract_text(self, data):
        return data["content"][0]["text"]


class GenerateContentProtocol(ProviderProtocol):
    """Gemini generateContent: key in the query string, one merged prompt"""

    name = "generate-content"

    def build_request(self, url, api_key, model, system_prompt, user_prompt):
        return ProviderRequest(
            url=url,
            headers={},
            payload={
                "contents": [
                    {"parts": [{"text": merged_prompt(system_prompt, user_prompt)}]}
                ]
            },
            params={"key": api_key},
        )

    def extract_text(self, data):
        return data["candidates"][0]["content"]["parts"][0]["text"]


CHAT_COMPLETIONS = ChatCompletionsProtocol()
MESSAGES = MessagesProtocol()
GENERATE_CONTENT = GenerateContentProtocol()


@dataclass(frozen=True)
class ProviderEntry:
    """One registry row; endpoint may contain a {model} placeholder"""
    provider_id: str
    display_name: str
    endpoint: str
    default_model: str
    protocol: ProviderProtocol
    fallback_error: str = "Chat Completions API error"

    def effective_model(self, configured: Optional[str]) -> str:
        configured = (configured or "").strip()
        return configured or self.default_model

    def endpoint_for(self, model: str, template: Optional[str] = None) -> str:
        return (template or self.endpoint).format(model=model)

    def build_request(self, api_key: str, model: str, system_prompt: str,
                      user_prompt: str, endpoint_template: Optional[str] = None) -> ProviderRequest:
        url = self.endpoint_for(model, endpoint_template)
        return self.protocol.build_request(url, api_key, model, system_prompt, user_prompt)

    def parse_response(self, status: int, body: str) -> str:
        return self.protocol.parse_response(status, body, self.fallback_error)


class ProviderRegistry:
    """Ordered, read-only lookup of provider entries by id"""

    def __init__(self, entries: List[ProviderEntry]):
        self._entries: Dict[str, ProviderEntry] = {}
        for entry in entries:
            if entry.provider_id in self._entries:
                raise ValueError(f"Duplicate provider id: {entry.provider_id}")
            self._entries[entry.provider_id] = entry

    def get(self, provider_id: Optional[str]) -> Optional[ProviderEntry]:
        if not provider_id:
            return None
        return self._entries.get(provider_id.strip().lower())

    def __contains__(self, provider_id) -> bool:
        return self.get(provider_id) is not None

    def __iter__(self) -> Iterator[ProviderEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def ids(self) -> List[str]:
        return list(self._entries.keys())


DEFAULT_REGISTRY = ProviderRegistry([
    ProviderEntry(
        "openai", "ChatGPT",
        "https://api.openai.com/v1/chat/completions",
        "gpt-3.5-turbo", CHAT_COMPLETIONS,
    ),
    ProviderEntry(
        "gemini", "Gemini",
        "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
        "gemini-2.0-flash", GENERATE_CONTENT,
        fallback_error="Google Gemini API error",
    ),
    ProviderEntry(
        "anthropic", "Claude",
        "https://api.anthropic.com/v1/messages",
        "claude-3-haiku-20240307", MESSAGES,
        fallback_error="Anthropic API error",
    ),
    ProviderEntry(
        "grok", "Grok",
        "https://api.x.ai/v1/chat/completions",
        "grok-2-latest", CHAT_COMPLETIONS,
    ),
    ProviderEntry(
        "deepseek", "DeepSeek",
        "https://api.deepseek.com/chat/completions",
        "deepseek-chat", CHAT_COMPLETIONS,
    ),
    ProviderEntry(
        "qwen", "Qwen",
        "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions",
        "qwen-plus", CHAT_COMPLETIONS,
    ),
    ProviderEntry(
        "doubao", "Doubao",
        "https://ark.cn-beijing.volces.com/api/v3/chat/completions",
        "doubao-lite", CHAT_COMPLETIONS,
    ),
])
