"""
AI services using DSPy.

The LM behind page translation is configured here; the translation
signatures live in farmmind.i18n.translator.
"""

from farmmind.services.ai.client import get_lm, configure_lm

__all__ = [
    "get_lm",
    "configure_lm",
]
