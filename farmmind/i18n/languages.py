"""
Languages offered by the translation API.

FarmMind serves farmers across India, so the list is English plus the
major Indian languages.
"""

from enum import Enum


class Language(str, Enum):
    """Supported languages."""

    EN = "en"      # English (source language of every page)
    HI = "hi"      # Hindi
    TE = "te"      # Telugu
    TA = "ta"      # Tamil
    KN = "kn"      # Kannada
    MR = "mr"      # Marathi
    BN = "bn"      # Bengali
    GU = "gu"      # Gujarati
    PA = "pa"      # Punjabi
    UR = "ur"      # Urdu


# Human-readable names
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "te": "Telugu",
    "ta": "Tamil",
    "kn": "Kannada",
    "mr": "Marathi",
    "bn": "Bengali",
    "gu": "Gujarati",
    "pa": "Punjabi",
    "ur": "Urdu",
}


# All supported, in menu order (for API)
SUPPORTED_LANGUAGES = list(Language)


# =============================================================================
# Utilities
# =============================================================================


def get_language_name(code: str) -> str:
    """Get human-readable language name; unknown codes are returned as given."""
    return LANGUAGE_NAMES.get(code.lower(), code)


def normalize_language_code(code: str) -> str:
    """Normalize language code to standard form."""
    code = code.lower().strip().replace("_", "-")

    # Handle names and regional variants
    variants = {
        "english": "en",
        "hindi": "hi",
        "telugu": "te",
        "tamil": "ta",
        "kannada": "kn",
        "marathi": "mr",
        "bengali": "bn",
        "bangla": "bn",
        "gujarati": "gu",
        "punjabi": "pa",
        "urdu": "ur",
        "en-us": "en",
        "en-gb": "en",
        "en-in": "en",
        "hi-in": "hi",
    }

    return variants.get(code, code)


def language_list() -> list[dict[str, str]]:
    """Payload of the language-list endpoint."""
    return [
        {"code": lang.value, "name": get_language_name(lang.value)}
        for lang in SUPPORTED_LANGUAGES
    ]
