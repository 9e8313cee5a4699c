from .models import ErrorKind, TargetLanguage, TranslationResult

UI_TEXTS = {
    "en": {
        "translatingTo": "Translating to",
        "copyButton": "Copy",
        "copied": "Copied",
        "requestFailed": "Translation request failed:",
        "pleaseConfigureApi": "Please configure an API key and select an AI model in settings first.",
        "settingsTitle": "Translator Settings",
        "interfaceLanguageLabel": "文/A",
        "aiSelectLabel": "Select AI",
        "apiKeyLabel": "API Key",
        "apiKeyPlaceholder": "Enter API Key",
        "modelLabel": "Model",
        "modelPlaceholder": "e.g. gpt-4o-mini or gemini-2.0-flash",
        "targetLanguageLabel": "Target Language",
        "chinese": "Chinese",
        "japanese": "Japanese",
        "britishEnglish": "English",
        "delaySecondsLabel": "Icon Display Delay (seconds)",
        "maxWidthLabel": "Translation Box Max Width (pixels)",
        "saveButton": "Save Settings",
        "settingsSaved": "Settings saved",
        "openSettings": "Open Translator Settings",
        "openFile": "Open File...",
        "quit": "Quit",
        "debugModeLabel": "Debug logging",
        "requestTimeoutLabel": "Request Timeout (seconds)",
        "noProvider": "(none)",
        "fileMenu": "File",
        "settingsMenu": "Settings",
        "readerTitle": "Selection Translator",
        "readerPlaceholder": "Open a file or paste text here, then select any part of it to translate.",
        "openFileFailed": "Could not open file:",
    },
    "zh": {
        "translatingTo": "正在翻译成",
        "copyButton": "复制",
        "copied": "已复制",
        "requestFailed": "翻译请求失败：",
        "pleaseConfigureApi": "请先在设置中输入 API 密钥并选择 AI 模型。",
        "settingsTitle": "翻译插件设置",
        "interfaceLanguageLabel": "文/A",
        "aiSelectLabel": "选择 AI",
        "apiKeyLabel": "API 密钥",
        "apiKeyPlaceholder": "输入API密钥",
        "modelLabel": "模型",
        "modelPlaceholder": "如 gpt-4o-mini 或 gemini-2.0-flash",
        "targetLanguageLabel": "翻译目标语言",
        "chinese": "中文",
        "japanese": "日语",
        "britishEnglish": "英语",
        "delaySecondsLabel": "图标显示延迟 (秒)",
        "maxWidthLabel": "翻译框最大宽度 (像素)",
        "saveButton": "保存设置",
        "settingsSaved": "设置已保存",
        "openSettings": "打开翻译器设置",
        "openFile": "打开文件...",
        "quit": "退出",
        "debugModeLabel": "调试日志",
        "requestTimeoutLabel": "请求超时 (秒)",
        "noProvider": "(未选择)",
        "fileMenu": "文件",
        "settingsMenu": "设置",
        "readerTitle": "划词翻译",
        "readerPlaceholder": "打开文件或在此粘贴文本，然后选中任意部分进行翻译。",
        "openFileFailed": "无法打开文件：",
    },
}

_LANGUAGE_KEYS = {
    TargetLanguage.CHINESE: "chinese",
    TargetLanguage.JAPANESE: "japanese",
    TargetLanguage.BRITISH_ENGLISH: "britishEnglish",
}


def texts(interface_language: str) -> dict:
    return UI_TEXTS.get(interface_language, UI_TEXTS["zh"])


def text(interface_language: str, key: str) -> str:
    return texts(interface_language)[key]


def language_label(interface_language: str, language: TargetLanguage) -> str:
    return text(interface_language, _LANGUAGE_KEYS[language])


def loading_message(interface_language: str, language: TargetLanguage) -> str:
    return f"{text(interface_language, 'translatingTo')} {language_label(interface_language, language)}..."


def error_message(interface_language: str, result: TranslationResult) -> str:
    """One human-readable line for a failed translation"""
    if result.error_kind == ErrorKind.CONFIGURATION_MISSING:
        message = text(interface_language, "pleaseConfigureApi")
        if result.error_message:
            message = f"{message} ({result.error_message})"
        return message
    detail = result.error_message or "Unknown error"
    return f"{text(interface_language, 'requestFailed')} {detail}"
