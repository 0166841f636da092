from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config import load_settings


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="typee", description="Terminal typing practice.")
    parser.add_argument("--words", type=non_negative_int, help="Number of words in the challenge.")
    parser.add_argument("--config", type=Path, help="Path to a JSON config file.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args.config)
    if args.words is not None:
        settings = replace(settings, word_count=args.words)

    # imported late so --help works without the TUI stack installed
    from .app import TypeeApp
    from textual.logging import TextualHandler

    logging.basicConfig(level=settings.log_level, handlers=[TextualHandler()])
    TypeeApp(settings).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
