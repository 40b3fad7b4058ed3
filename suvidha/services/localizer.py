"""Request-scoped localization for API messages.

Translations for every supported language are loaded once at import time from
static/translations.json and never mutated. Each request resolves its own
Localizer (from ?lang= or Accept-Language) and passes it explicitly to the code
that produces user-facing text.

Usage:
    localizer = Localizer("hi")
    message = localizer.t("activity.meter_reading", reading="150")
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from fastapi import Request

from suvidha.config import get_settings

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("en", "hi")
FALLBACK_LANGUAGE = "en"

_TRANSLATIONS_PATH = Path(__file__).parent.parent / "static" / "translations.json"


def _load_translations(path: Path) -> Mapping[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            return MappingProxyType(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error("Failed to load translations from %s: %s", path, e)
        return MappingProxyType({})


_TRANSLATIONS = _load_translations(_TRANSLATIONS_PATH)


def normalize_language(value: str | None) -> str | None:
    """Map a language tag such as 'hi-IN' or 'en_US' to a supported language, or None."""
    if not value:
        return None
    primary = value.strip().replace("_", "-").split("-")[0].lower()
    return primary if primary in SUPPORTED_LANGUAGES else None


def parse_accept_language(header: str | None) -> str | None:
    """Pick the highest-weighted supported language from an Accept-Language header."""
    if not header:
        return None
    candidates: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        weight = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                weight = float(params[2:])
            except ValueError:
                weight = 0.0
        language = normalize_language(tag)
        if language and weight > 0:
            candidates.append((-weight, position, language))
    if not candidates:
        return None
    return sorted(candidates)[0][2]


class Localizer:
    """Translation lookup bound to one language."""

    def __init__(self, language: str | None = None) -> None:
        self.language = normalize_language(language) or FALLBACK_LANGUAGE

    @classmethod
    def from_request(cls, request: Request) -> "Localizer":
        """Resolve the request language: ?lang= first, then Accept-Language, then settings."""
        language = normalize_language(request.query_params.get("lang")) or parse_accept_language(
            request.headers.get("accept-language")
        )
        return cls(language or get_settings().default_language)

    def _lookup(self, language: str, key: str) -> str | None:
        value: Any = _TRANSLATIONS.get(language, {})
        for part in key.split("."):
            if isinstance(value, Mapping) and part in value:
                value = value[part]
            else:
                return None
        return value if isinstance(value, str) else None

    def t(self, key: str, default: str | None = None, **kwargs: Any) -> str:
        """Get translation for a key with optional placeholder substitution.

        Falls back to English, then to `default`, then to the key itself.
        """
        value = self._lookup(self.language, key)
        if value is None and self.language != FALLBACK_LANGUAGE:
            value = self._lookup(FALLBACK_LANGUAGE, key)
        if value is None:
            logger.warning("Translation key not found: %s (%s)", key, self.language)
            value = default if default is not None else key

        if kwargs:
            try:
                return value.format(**kwargs)
            except KeyError as e:
                logger.warning("Missing placeholder %s for key: %s", e, key)
        return value


def get_localizer(request: Request) -> Localizer:
    """FastAPI dependency returning the Localizer for the current request."""
    return Localizer.from_request(request)


__all__ = [
    "SUPPORTED_LANGUAGES",
    "Localizer",
    "get_localizer",
    "normalize_language",
    "parse_accept_language",
]
