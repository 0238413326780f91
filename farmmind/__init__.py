"""
FarmMind - live page translation for the farm assistant.

A BeautifulSoup-backed page translation engine (extract, batch, cache,
apply, restore, re-apply on mutation) and the FastAPI translation service
it talks to.
"""

__version__ = "0.1.0"
