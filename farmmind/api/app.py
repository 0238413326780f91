"""
FastAPI application for FarmMind translation.

Serves the two endpoints the page translator talks to:
    POST /api/translate             {texts, source_lang, target_lang} → {translations}
    GET  /api/translate/languages   → {languages: [{code, name}]}

Errors are returned as {"error": message} so the page can show them.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from farmmind.config import Settings, get_settings
from farmmind.i18n import Translator, TranslationServiceError, language_list
from farmmind.integrations.sentry import init_sentry, report_translation_failure
from farmmind.storage import CacheStorage, InMemoryCacheStorage

logger = logging.getLogger(__name__)


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup."""

    cache: CacheStorage
    translator: Translator


state = AppState()


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()

    if init_sentry():
        logger.info("Sentry error tracking enabled")

    state.cache = InMemoryCacheStorage()
    state.translator = Translator(storage=state.cache)

    logger.info(f"FarmMind API starting in {settings.environment} mode")

    yield

    logger.info("FarmMind API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="FarmMind API",
    description="Translation service for the FarmMind page translator",
    version="0.1.0",
    lifespan=lifespan,
)


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Dependencies
# =============================================================================


def get_translator() -> Translator:
    return state.translator


# =============================================================================
# Request Models
# =============================================================================


class TranslateRequest(BaseModel):
    # Left loose so a non-list gets our error message rather than a 422
    texts: Any = None
    source_lang: str | None = None
    target_lang: str | None = None


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def normalize_texts(texts: list[Any], max_chars: int) -> list[str]:
    """Non-strings become empty, long strings are cut to ``max_chars``."""
    return [t[:max_chars] if isinstance(t, str) else "" for t in texts]


# =============================================================================
# Health
# =============================================================================


@app.get("/health")
async def health():
    return {"status": "ok"}


# =============================================================================
# Translation
# =============================================================================


@app.post("/api/translate")
async def translate_texts(
    request: TranslateRequest,
    translator: Translator = Depends(get_translator),
    settings: Settings = Depends(get_settings),
):
    """
    Translate a batch of page strings.

    The response lists one translation per input text, in the same order.
    """
    if not isinstance(request.texts, list):
        return error_response(400, "texts must be an array")
    if len(request.texts) > settings.translate_max_texts:
        return error_response(400, f"Too many texts. Max {settings.translate_max_texts}.")

    source_lang = request.source_lang or "en"
    target_lang = request.target_lang or "hi"
    texts = normalize_texts(request.texts, settings.translate_max_chars)

    try:
        translations = await translator.translate_batch(texts, target=target_lang, source=source_lang)
    except TranslationServiceError as e:
        report_translation_failure(e, target_lang, len(texts))
        return error_response(500, str(e) or "Translation failed")

    return {"translations": translations}


@app.get("/api/translate/languages")
async def list_languages():
    """List all supported languages for translation."""
    return {"languages": language_list()}
