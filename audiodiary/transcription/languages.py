"""
Supported diary languages and per-provider language codes.

Callers pass either a short code ("lv") or a BCP-47 tag ("lv-LV"); each
provider needs its own form, so the conversion lives here.
"""
from dataclasses import dataclass
from typing import List, Optional

# Hints meaning "let the provider detect the language"
AUTO_DETECT = ("", "auto", "detect")


@dataclass(frozen=True)
class Language:
    """One supported language and the codes each service expects."""
    code: str
    name: str
    whisper_code: str
    google_code: str
    assembly_code: str


SUPPORTED_LANGUAGES: List[Language] = [
    Language("lv", "Latviešu", "lv", "lv-LV", "lv"),
    Language("en", "English", "en", "en-US", "en"),
    Language("ru", "Русский", "ru", "ru-RU", "ru"),
    Language("de", "Deutsch", "de", "de-DE", "de"),
    Language("fr", "Français", "fr", "fr-FR", "fr"),
    Language("es", "Español", "es", "es-ES", "es"),
    Language("it", "Italiano", "it", "it-IT", "it"),
    Language("pt", "Português", "pt", "pt-PT", "pt"),
    Language("nl", "Nederlands", "nl", "nl-NL", "nl"),
    Language("pl", "Polski", "pl", "pl-PL", "pl"),
    Language("sv", "Svenska", "sv", "sv-SE", "sv"),
    Language("da", "Dansk", "da", "da-DK", "da"),
    Language("no", "Norsk", "no", "no-NO", "no"),
    Language("fi", "Suomi", "fi", "fi-FI", "fi"),
    Language("et", "Eesti", "et", "et-EE", "et"),
    Language("lt", "Lietuvių", "lt", "lt-LT", "lt"),
]

_BY_CODE = {lang.code: lang for lang in SUPPORTED_LANGUAGES}


def primary_subtag(language: Optional[str]) -> Optional[str]:
    """Return the lower-case primary subtag, or None for auto-detection.

    >>> primary_subtag("lv-LV")
    'lv'
    >>> primary_subtag("auto") is None
    True
    """
    if language is None:
        return None
    tag = language.strip().replace("_", "-")
    if tag.lower() in AUTO_DETECT:
        return None
    return tag.split("-")[0].lower()


def get_language(language: Optional[str]) -> Optional[Language]:
    code = primary_subtag(language)
    return _BY_CODE.get(code) if code else None


def to_bcp47(language: Optional[str], default: str = "lv-LV") -> str:
    """Full locale tag for services that need one (Google, Azure, on-device).

    Tags that already carry a region are kept; known short codes are
    expanded from the table; anything else falls back to ``default``.
    """
    if language is None or primary_subtag(language) is None:
        return default
    tag = language.strip().replace("_", "-")
    if "-" in tag:
        primary, region = tag.split("-", 1)
        return f"{primary.lower()}-{region.upper()}"
    known = _BY_CODE.get(tag.lower())
    if known:
        return known.google_code
    return default


def is_supported(language: Optional[str]) -> bool:
    return get_language(language) is not None
