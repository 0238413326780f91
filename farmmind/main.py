"""
FarmMind - command line entry point.

    farmmind serve                          run the translation API
    farmmind translate page.html --lang hi  translate a page through the API
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from farmmind.config import get_settings
from farmmind.page import LiveDocument, PageTranslator, TranslationClient
from farmmind.storage import JsonFilePreferenceStore

logger = logging.getLogger(__name__)


async def translate_file(
    path: str,
    lang: str,
    output: str | None = None,
    api: str | None = None,
    restore: bool = False,
) -> int:
    """
    Load an HTML page, apply ``lang`` and write the result.

    With ``restore`` the original is written back afterwards, which checks
    that a translate/restore round trip leaves the page untouched.
    """
    settings = get_settings()
    translate_url = settings.translate_api_url
    languages_url = settings.translate_languages_url
    if api:
        base = api.rstrip("/")
        translate_url = f"{base}/api/translate"
        languages_url = f"{base}/api/translate/languages"

    document = LiveDocument.from_file(path)
    original = str(document.body)
    client = TranslationClient(translate_url, languages_url)
    translator = PageTranslator.from_settings(
        document,
        client,
        JsonFilePreferenceStore(settings.translate_state_path),
        settings,
    )

    try:
        await translator.registry.refresh(client)
        if not translator.registry.has(lang):
            logger.error(f"Unsupported language: {lang} (have {', '.join(translator.registry.codes)})")
            return 1

        await translator.apply_language(lang)
        if translator.current_language != lang and lang != "en":
            logger.error(f"Translation to '{lang}' failed")
            return 1

        if restore:
            await translator.restore_original()
            if str(document.body) != original:
                logger.error("Restored page differs from the original")
                return 1
    finally:
        await client.aclose()

    result = document.serialize()
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(result)
        logger.info(f"Wrote {output}")
    else:
        sys.stdout.write(result)
    return 0


def serve(host: str | None = None, port: int | None = None) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "farmmind.api.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.debug and not settings.is_production,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(prog="farmmind")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="run the translation API")
    serve_cmd.add_argument("--host")
    serve_cmd.add_argument("--port", type=int)

    translate_cmd = commands.add_parser("translate", help="translate an HTML page")
    translate_cmd.add_argument("page")
    translate_cmd.add_argument("--lang", required=True)
    translate_cmd.add_argument("--output", "-o")
    translate_cmd.add_argument("--api", help="base URL of the FarmMind API")
    translate_cmd.add_argument("--restore", action="store_true",
                               help="restore the original after translating")

    args = parser.parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port)
        return 0

    return asyncio.run(
        translate_file(args.page, args.lang, args.output, args.api, args.restore)
    )


if __name__ == "__main__":
    raise SystemExit(main())
