from typing import Optional, Union

from .models import TargetLanguage

BASE_INSTRUCTION = "You are a precise translation assistant."

FORMAT_INSTRUCTION = (
    "Please maintain the original format structure (headings, paragraphs, etc.), "
    "ensuring the translated text matches the original format exactly."
)

LANGUAGE_INSTRUCTIONS = {
    TargetLanguage.CHINESE: (
        "Please translate the text into fluent, natural Chinese, using modern Mandarin "
        "expressions and avoiding literal translations."
    ),
    TargetLanguage.JAPANESE: (
        "Please translate the text into standard Japanese, using appropriate honorifics "
        "and grammatical structures, ensuring it conforms to Japanese expression habits."
    ),
    TargetLanguage.BRITISH_ENGLISH: (
        "Please translate the text into British English, using British spelling conventions "
        "(such as 'colour' rather than 'color'), and British expressions."
    ),
}

# Names used inside prompts; the UI has its own localised labels in ui_texts
LANGUAGE_NAMES = {
    TargetLanguage.CHINESE: "Chinese",
    TargetLanguage.JAPANESE: "Japanese",
    TargetLanguage.BRITISH_ENGLISH: "English",
}


def _as_language(language: Union[TargetLanguage, str, None]) -> TargetLanguage:
    if isinstance(language, TargetLanguage):
        return language
    return TargetLanguage.resolve(language)


def language_name(language: Union[TargetLanguage, str, None]) -> str:
    return LANGUAGE_NAMES[_as_language(language)]


def build_system_prompt(language: Union[TargetLanguage, str, None], preserve_format: bool) -> str:
    """Base instruction, then language guidance, then the optional format rule"""
    parts = [BASE_INSTRUCTION, LANGUAGE_INSTRUCTIONS[_as_language(language)]]
    if preserve_format:
        parts.append(FORMAT_INSTRUCTION)
    return " ".join(parts)


def build_user_prompt(text: str, language: Union[TargetLanguage, str, None],
                      preserve_format: bool = False, structure: Optional[str] = None) -> str:
    """Plain request unless a detected document structure is supplied with preserve_format.

    Selections carry no structure, so translations use the plain form and rely on
    the system instruction for keeping the format.
    """
    name = language_name(language)
    if preserve_format and structure:
        return (
            f"Please translate the following text to {name}, maintaining the original text "
            f"format structure (such as paragraphs, headings, etc.). Please maintain the same "
            f"language style whilst translating:\n\n{text}"
        )
    return f"Please translate the following text to {name}:\n\n{text}"


def merged_prompt(system_prompt: str, user_prompt: Optional[str]) -> str:
    """Single-prompt form for providers without a separate system role"""
    return system_prompt + "\n" + (user_prompt or "")
