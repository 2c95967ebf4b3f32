"""
cli.py -- Command-line verse matching.

Usage:
    scripture-pal "I'm really anxious about tomorrow"
    scripture-pal --length long --max-alternatives 4 "I feel so alone"
    scripture-pal --validate-config
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from engine.config import get_environment_info, load_config, validate_configuration
from engine.logging_setup import configure_logging
from engine.models import ResponseLength, VerseMatchRequest
from engine.verse_matcher import VerseMatcher

logger = logging.getLogger("scripture_pal.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scripture Pal -- find a verse for how you feel")
    parser.add_argument("text", nargs="*", help="What is on your heart (omit to read stdin)")
    parser.add_argument("--max-alternatives", type=int, default=None, help="Alternative verses to include")
    parser.add_argument(
        "--length",
        choices=[length.value for length in ResponseLength],
        default=None,
        help="Explanation length",
    )
    parser.add_argument("--no-explanation", action="store_true", help="Omit the explanation")
    parser.add_argument("--translation", type=str, default=None, help="Bible translation id")
    parser.add_argument("--validate-config", action="store_true", help="Validate configuration and exit")
    parser.add_argument("--info", action="store_true", help="Print environment info and exit")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    config = load_config()
    configure_logging(config.logging)

    if args.validate_config:
        result = validate_configuration(config)
        print(json.dumps({"isValid": result.is_valid, "errors": result.errors}, indent=2))
        return 0 if result.is_valid else 1

    if args.info:
        print(json.dumps(get_environment_info(config), indent=2))
        return 0

    text = " ".join(args.text) if args.text else sys.stdin.read()

    updates: dict = {}
    if args.max_alternatives is not None:
        updates["max_alternative_verses"] = args.max_alternatives
    if args.length is not None:
        updates["response_length"] = ResponseLength(args.length)
    if args.no_explanation:
        updates["include_explanation"] = False
    if args.translation:
        updates["preferred_translation"] = args.translation
    preferences = config.user_preferences.model_copy(update=updates)

    matcher = VerseMatcher(fallback_verses=config.app.fallback_verses)
    response = matcher.match(VerseMatchRequest(text=text, preferences=preferences))
    print(json.dumps(response.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
