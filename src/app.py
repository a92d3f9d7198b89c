"""Application entry point for gifblock."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.json_pattern_store import JsonPatternStore
from core.blocklist import merge_urls, should_block_url
from core.gif_classifier import is_gif_url
from core.url_normalizer import normalize_url

NAME = "GIFBLOCK"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _log_handlers(config: settings.LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if config.console:
        handlers.append(logging.StreamHandler())
    if config.file is not None:
        path = config.file.absolute_path
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=config.file.max_bytes,
                backupCount=config.file.backup_count,
                encoding="utf-8",
            )
        )
    return handlers


def _configure_logging(config: settings.LoggingConfig) -> None:
    if not config.enabled:
        return
    handlers = _log_handlers(config)
    if not handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in handlers:
        handler.setLevel(config.level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=config.level, handlers=handlers)


def _check(store: JsonPatternStore, urls: list[str]) -> None:
    patterns = store.get_patterns()
    for url in urls:
        gif_like = is_gif_url(url)
        blocked = should_block_url(url, patterns)
        print(f"{url}")
        print(f"  normalized: {normalize_url(url)}")
        print(f"  gif-like:   {'yes' if gif_like else 'no'}")
        print(f"  blocked:    {'yes' if blocked else 'no'}")


def _add(store: JsonPatternStore, urls: list[str]) -> None:
    logger = logging.getLogger(__name__)
    current = store.get_patterns()
    for url in urls:
        # Matching only ever blocks GIF-like URLs, so warn about dead entries.
        if not is_gif_url(url):
            logger.warning("%s does not look like a GIF URL and will never match", url)
    merged = merge_urls(current, urls)
    added = len(merged) - len(current)
    if added:
        store.set_patterns(merged)
    print(f"Added {added} pattern(s); {len(merged)} in blocklist.")


def _setup() -> None:
    _print_banner()
    from frontend.app import ConfigPanelApp

    ConfigPanelApp().run()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="gifblock")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("config", help="Launch the config TUI")
    check_parser = subparsers.add_parser("check", help="Check URLs against the blocklist")
    check_parser.add_argument("urls", nargs="+", metavar="URL")
    add_parser = subparsers.add_parser("add", help="Add GIF URLs to the blocklist")
    add_parser.add_argument("urls", nargs="+", metavar="URL")

    args = parser.parse_args(argv)
    if args.command == "config":
        _setup()
        return

    if args.command not in {"check", "add"}:
        parser.print_help()
        return

    config_path = settings.resolve_config_path()
    _configure_logging(settings.build_logging_config(settings.load_config(config_path)))
    store = JsonPatternStore(config_path)
    if args.command == "check":
        _check(store, args.urls)
    else:
        _add(store, args.urls)


if __name__ == "__main__":
    main()
