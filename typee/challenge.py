from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from .errors import ContractViolation
from .keys import Key, KeyKind

logger = logging.getLogger(__name__)

FILLER_WORD = "bongle"
SEPARATOR = " "


class CharStatus(Enum):
    NOT_YET_TYPED = "not_yet_typed"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class Phase(Enum):
    IN_PROGRESS = "in_progress"
    TRAILING_MISTAKE = "trailing_mistake"
    FINISHED = "finished"


# ---------------------------
# Helpers
# ---------------------------

def _clock(now: Optional[float]) -> float:
    return time.monotonic() if now is None else now


def round_one(value: float) -> float:
    """Round half-up to one decimal place (66.65 -> 66.7, not banker's rounding)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


# ---------------------------
# Model
# ---------------------------

@dataclass(frozen=True)
class ChallengeState:
    """
    One timed typing exercise over a fixed target text.

    Instances are immutable: every keystroke or poll returns a new state.
    Timestamps are monotonic clock readings in seconds.
    """

    text: str
    text_length: int
    word_count: int
    cursor: int = 0
    mistyped_positions: FrozenSet[int] = field(default_factory=frozenset)
    finished: bool = False
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    wpm_samples: Tuple[float, ...] = ()

    @classmethod
    def from_text(cls, text: str) -> "ChallengeState":
        return cls(text=text, text_length=len(text), word_count=len(text.split()))

    @property
    def phase(self) -> Phase:
        if self.finished:
            return Phase.FINISHED
        if self.cursor == self.text_length:
            return Phase.TRAILING_MISTAKE
        return Phase.IN_PROGRESS

    @property
    def live_wpm(self) -> float:
        return self.wpm_samples[-1] if self.wpm_samples else 0.0

    def apply_key(self, key: Key, *, now: Optional[float] = None) -> "ChallengeState":
        return apply_key(self, key, now=now)

    def poll_wpm(self, *, now: Optional[float] = None) -> "ChallengeState":
        return poll_wpm(self, now=now)

    def accuracy_percent(self) -> float:
        return accuracy_percent(self)

    def wpm(self) -> float:
        return wpm(self)

    def char_status(self, index: int) -> CharStatus:
        return char_status(self, index)


def generate(word_count: int) -> ChallengeState:
    """Build a fresh challenge from the filler word repeated word_count times."""
    if word_count < 0:
        raise ValueError(f"word_count must be non-negative, got {word_count}")
    text = (FILLER_WORD + SEPARATOR) * word_count
    return ChallengeState.from_text(text)


# ---------------------------
# Keystroke handling
# ---------------------------

def apply_key(state: ChallengeState, key: Key, *, now: Optional[float] = None) -> ChallengeState:
    now = _clock(now)
    # The clock starts on the first key of any kind, ignored keys included.
    if state.started_at is None:
        logger.debug("challenge started by %r", key.name)
        state = replace(state, started_at=now)

    if key.kind is KeyKind.OTHER:
        return state

    if state.finished:
        raise ContractViolation(
            f"{key.kind.value} input received after the challenge finished"
        )

    if key.kind is KeyKind.BACKSPACE:
        return replace(state, cursor=max(state.cursor - 1, 0))

    return _submit_char(state, key.char or "", now)


def _submit_char(state: ChallengeState, char: str, now: float) -> ChallengeState:
    if state.cursor == state.text_length:
        # Past the end: only a space closes out a trailing mistake.
        if char == SEPARATOR:
            return _finish(state, now)
        return state

    correct = char == state.text[state.cursor]
    mistyped = state.mistyped_positions
    if not correct:
        mistyped = mistyped | {state.cursor}

    state = replace(state, cursor=state.cursor + 1, mistyped_positions=mistyped)
    if state.cursor == state.text_length and correct:
        return _finish(state, now)
    return state


def _finish(state: ChallengeState, now: float) -> ChallengeState:
    finished = replace(state, finished=True, finished_at=now)
    logger.debug(
        "challenge finished: %d chars, %d mistyped",
        finished.text_length,
        len(finished.mistyped_positions),
    )
    return finished


# ---------------------------
# Statistics
# ---------------------------

def accuracy_percent(state: ChallengeState) -> float:
    if not state.mistyped_positions:
        return 100.0
    correct = state.text_length - len(state.mistyped_positions)
    return round_one(100.0 * correct / state.text_length)


def wpm(state: ChallengeState) -> float:
    """Final words per minute over the whole text. Only defined once finished."""
    if state.started_at is None:
        raise ContractViolation("wpm requested before the challenge started")
    if state.finished_at is None:
        raise ContractViolation("wpm requested before the challenge finished")
    elapsed = state.finished_at - state.started_at
    if elapsed <= 0:
        raise ContractViolation(f"non-positive challenge duration: {elapsed!r}s")
    return round_one(state.word_count / (elapsed / 60.0))


def completed_words(state: ChallengeState) -> int:
    return state.text[: state.cursor + 1].count(SEPARATOR)


def poll_wpm(state: ChallengeState, *, now: Optional[float] = None) -> ChallengeState:
    """Append one running-WPM sample for the live speed graph."""
    if state.finished_at is not None:
        raise ContractViolation("wpm polled on a finished challenge")
    if state.started_at is None:
        return _append_sample(state, 0.0)

    words = completed_words(state)
    elapsed = _clock(now) - state.started_at
    if words == 0 or elapsed <= 0:
        return _append_sample(state, 0.0)
    return _append_sample(state, round_one(words / (elapsed / 60.0)))


def _append_sample(state: ChallengeState, sample: float) -> ChallengeState:
    return replace(state, wpm_samples=state.wpm_samples + (sample,))


# ---------------------------
# Rendering queries
# ---------------------------

def char_status(state: ChallengeState, index: int) -> CharStatus:
    if not 0 <= index < state.text_length:
        raise IndexError(f"position {index} outside text of length {state.text_length}")
    if index >= state.cursor:
        return CharStatus.NOT_YET_TYPED
    if index in state.mistyped_positions:
        return CharStatus.INCORRECT
    return CharStatus.CORRECT
