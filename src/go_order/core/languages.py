from pathlib import Path

_DEFAULT_LANGUAGE = "go"

_LANGUAGE_ALIASES = {
    "go": "go",
    "golang": "go",
}

_EXTENSION_LANGUAGE_MAP = {
    ".go": "go",
}

_SUPPORTED_LANGUAGES = set(_EXTENSION_LANGUAGE_MAP.values())


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(_SUPPORTED_LANGUAGES)}")
    return resolved


def detect_language_from_path(file_path: Path) -> str:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_MAP:
        return _EXTENSION_LANGUAGE_MAP[suffix]
    raise ValueError(f"Unsupported file extension: {suffix}")


def resolve_language(language: str | None, file_path: Path | None) -> str:
    """Pick the language from an explicit name, then the file suffix, then the default."""
    if language:
        return normalize_language(language)
    if file_path:
        return detect_language_from_path(file_path)
    return _DEFAULT_LANGUAGE
