from .challenge import (
    ChallengeState,
    CharStatus,
    Phase,
    accuracy_percent,
    apply_key,
    char_status,
    generate,
    poll_wpm,
    wpm,
)
from .errors import ContractViolation
from .keys import Key, KeyKind

__all__ = [
    "ChallengeState",
    "CharStatus",
    "ContractViolation",
    "Key",
    "KeyKind",
    "Phase",
    "accuracy_percent",
    "apply_key",
    "char_status",
    "generate",
    "poll_wpm",
    "wpm",
]
