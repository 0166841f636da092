from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent / "typee.config.json"
CONFIG_ENV = "TYPEE_CONFIG"

DEFAULT_WORD_COUNT = 5
DEFAULT_POLL_INTERVAL_SEC = 1.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    word_count: int = DEFAULT_WORD_COUNT
    poll_interval_sec: float = DEFAULT_POLL_INTERVAL_SEC
    log_level: str = DEFAULT_LOG_LEVEL


def config_path(path: Optional[Path] = None) -> Path:
    if path:
        return path
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return CONFIG_PATH


def load_config(path: Optional[Path] = None) -> Dict[str, object]:
    resolved = config_path(path)
    if not resolved.exists():
        return {}
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        # a broken config file should not stop a practice run
        logger.warning("ignoring unreadable config %s: %s", resolved, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: expected a JSON object", resolved)
        return {}
    return data


def load_settings(path: Optional[Path] = None) -> Settings:
    raw = load_config(path)

    word_count = raw.get("word_count", DEFAULT_WORD_COUNT)
    if not isinstance(word_count, int) or isinstance(word_count, bool) or word_count < 0:
        logger.warning("invalid word_count %r, using %d", word_count, DEFAULT_WORD_COUNT)
        word_count = DEFAULT_WORD_COUNT

    poll = raw.get("poll_interval_sec", DEFAULT_POLL_INTERVAL_SEC)
    try:
        poll = float(poll)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        poll = -1.0
    if not math.isfinite(poll) or poll <= 0:
        logger.warning("invalid poll_interval_sec, using %s", DEFAULT_POLL_INTERVAL_SEC)
        poll = DEFAULT_POLL_INTERVAL_SEC

    log_level = str(raw.get("log_level", DEFAULT_LOG_LEVEL)).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning("unknown log_level %r, using %s", log_level, DEFAULT_LOG_LEVEL)
        log_level = DEFAULT_LOG_LEVEL

    return Settings(word_count=word_count, poll_interval_sec=poll, log_level=log_level)
