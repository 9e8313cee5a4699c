from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Point:
    """A position in viewport coordinates"""
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class SelectionSnapshot:
    """Selected text plus the pointer position at release time"""
    text: str
    anchor: Point

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ValueError("SelectionSnapshot requires non-empty text")
        object.__setattr__(self, "text", self.text.strip())


class UIPhase(Enum):
    IDLE = "idle"
    AFFORDANCE_ARMED = "affordance_armed"
    AFFORDANCE_SHOWN = "affordance_shown"
    LOADING = "loading"
    RESULT = "result"


@dataclass(frozen=True)
class UIState:
    """The single live UI state; carries at most one snapshot"""
    phase: UIPhase = UIPhase.IDLE
    snapshot: Optional[SelectionSnapshot] = None
    content: Optional[str] = None

    @classmethod
    def idle(cls) -> "UIState":
        return cls()

    @property
    def has_visuals(self) -> bool:
        return self.phase in (UIPhase.AFFORDANCE_SHOWN, UIPhase.LOADING, UIPhase.RESULT)


class TargetLanguage(Enum):
    CHINESE = "chinese"
    JAPANESE = "japanese"
    BRITISH_ENGLISH = "british-english"

    @classmethod
    def resolve(cls, code: Optional[str]) -> "TargetLanguage":
        """Map a stored language code to a member; unknown codes become Chinese"""
        try:
            return cls(code)
        except ValueError:
            return cls.CHINESE


@dataclass(frozen=True)
class ProviderConfig:
    """Provider settings as read from the configuration store for one request"""
    provider_id: str
    api_key: str = field(repr=False)
    model_name: str = ""
    endpoint_template: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key) and bool(self.provider_id)


@dataclass(frozen=True)
class TranslationRequest:
    source_text: str
    target_language: TargetLanguage = TargetLanguage.CHINESE
    preserve_format: bool = True


class ErrorKind(Enum):
    CONFIGURATION_MISSING = "configuration_missing"
    PROVIDER_ERROR = "provider_error"
    NETWORK_ERROR = "network_error"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class TranslationResult:
    """Success carries translated_text; failure carries error_kind and message"""
    translated_text: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "TranslationResult":
        return cls(translated_text=text)

    @classmethod
    def failure(cls, kind: ErrorKind, message: Optional[str] = None) -> "TranslationResult":
        return cls(error_kind=kind, error_message=message)

    @property
    def ok(self) -> bool:
        return self.error_kind is None


@dataclass(frozen=True)
class PanelLayout:
    """Computed panel geometry; max_height is None when the panel may grow freely"""
    x: float
    y: float
    width: float
    max_height: Optional[float] = None

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)
