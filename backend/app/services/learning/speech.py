"""
Speech recognition locale lookup.

Maps a course's target language name ("Spanish") to the BCP-47 locale the
client's speech recognizer should use ("es-ES"). The table lives in
config/default.yaml under speech.locales.
"""

from typing import Any, Optional

from app.config import yaml_config


def _speech_config() -> dict[str, Any]:
    return yaml_config.get("speech", {}) or {}


def get_default_locale() -> str:
    """Locale used for languages missing from the table."""
    return _speech_config().get("default_locale", "en-US")


def speech_locale(language: Optional[str]) -> str:
    """
    Resolve the recognition locale for a language name.

    Lookup is case-insensitive and ignores surrounding whitespace. Unknown
    or missing languages fall back to the default locale.
    """
    if not language:
        return get_default_locale()

    locales = _speech_config().get("locales", {}) or {}
    wanted = language.strip().lower()
    for name, locale in locales.items():
        if str(name).lower() == wanted:
            return locale
    return get_default_locale()
