import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from PyQt6.QtCore import QSettings

from .models import ProviderConfig, TargetLanguage
from .providers import DEFAULT_REGISTRY, ProviderRegistry

logger = logging.getLogger(__name__)

ORGANIZATION = "MinTrans"
APPLICATION = "SelectionTranslator"

DEFAULTS = {
    "apiKey": "",
    "selectedAI": "",
    "modelName": "",
    "targetLanguage": TargetLanguage.CHINESE.value,
    "interfaceLanguage": "zh",
    "delaySeconds": 0.5,
    "maxWidth": 400,
    "debugMode": False,
    "requestTimeout": 30,
}

DELAY_RANGE = (0.1, 5.0)
MAX_WIDTH_RANGE = (200, 1000)
TIMEOUT_RANGE = (1, 300)
INTERFACE_LANGUAGES = ("zh", "en")


class ConfigStore:
    """Key/value persistence backed by QSettings"""

    def __init__(self, settings: Optional[QSettings] = None):
        self.settings = settings or QSettings(ORGANIZATION, APPLICATION)

    @classmethod
    def from_file(cls, path) -> "ConfigStore":
        """Store backed by a portable INI file instead of the platform registry"""
        return cls(QSettings(str(path), QSettings.Format.IniFormat))

    def get(self, key: str, default: Any = None) -> Any:
        if default is None:
            default = DEFAULTS.get(key)
        return self.settings.value(key, default)

    def set(self, key: str, value: Any) -> None:
        # QSettings' INI backend stores bools as "true"/"false" strings anyway
        if isinstance(value, bool):
            value = "true" if value else "false"
        self.settings.setValue(key, value)

    def sync(self) -> None:
        self.settings.sync()

    def clear(self) -> None:
        self.settings.clear()


def _as_float(value, key, lower, upper):
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value %r for %s; using default", value, key)
        number = float(DEFAULTS[key])
    return max(lower, min(upper, number))


def _as_int(value, key, lower, upper):
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        logger.warning("Invalid value %r for %s; using default", value, key)
        number = int(DEFAULTS[key])
    return max(lower, min(upper, number))


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _as_str(value) -> str:
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class AppConfig:
    """Typed snapshot of every stored setting"""
    api_key: str = field(default="", repr=False)
    selected_ai: str = ""
    model_name: str = ""
    target_language: TargetLanguage = TargetLanguage.CHINESE
    interface_language: str = "zh"
    delay_seconds: float = 0.5
    max_width: int = 400
    debug_mode: bool = False
    request_timeout: float = 30

    @classmethod
    def from_store(cls, store) -> "AppConfig":
        interface_language = _as_str(store.get("interfaceLanguage", DEFAULTS["interfaceLanguage"]))
        if interface_language not in INTERFACE_LANGUAGES:
            interface_language = DEFAULTS["interfaceLanguage"]

        return cls(
            api_key=_as_str(store.get("apiKey", "")),
            selected_ai=_as_str(store.get("selectedAI", "")).lower(),
            model_name=_as_str(store.get("modelName", "")),
            target_language=TargetLanguage.resolve(
                _as_str(store.get("targetLanguage", DEFAULTS["targetLanguage"]))),
            interface_language=interface_language,
            delay_seconds=_as_float(store.get("delaySeconds", DEFAULTS["delaySeconds"]),
                                    "delaySeconds", *DELAY_RANGE),
            max_width=_as_int(store.get("maxWidth", DEFAULTS["maxWidth"]),
                              "maxWidth", *MAX_WIDTH_RANGE),
            debug_mode=_as_bool(store.get("debugMode", DEFAULTS["debugMode"])),
            request_timeout=_as_float(store.get("requestTimeout", DEFAULTS["requestTimeout"]),
                                      "requestTimeout", *TIMEOUT_RANGE),
        )

    def provider_config(self, registry: ProviderRegistry = DEFAULT_REGISTRY) -> ProviderConfig:
        entry = registry.get(self.selected_ai)
        return ProviderConfig(
            provider_id=self.selected_ai,
            api_key=self.api_key,
            model_name=self.model_name,
            endpoint_template=entry.endpoint if entry else "",
        )

    def save(self, store) -> None:
        store.set("apiKey", self.api_key)
        store.set("selectedAI", self.selected_ai)
        store.set("modelName", self.model_name)
        store.set("targetLanguage", self.target_language.value)
        store.set("interfaceLanguage", self.interface_language)
        store.set("delaySeconds", self.delay_seconds)
        store.set("maxWidth", self.max_width)
        store.set("debugMode", self.debug_mode)
        store.set("requestTimeout", self.request_timeout)
