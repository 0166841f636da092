from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyKind(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    OTHER = "other"


@dataclass(frozen=True)
class Key:
    """A keystroke as the challenge model sees it."""

    kind: KeyKind
    char: Optional[str] = None
    name: str = ""

    @classmethod
    def char_key(cls, char: str) -> "Key":
        if len(char) != 1:
            raise ValueError(f"expected a single character, got {char!r}")
        return cls(KeyKind.CHAR, char=char, name=char)

    @classmethod
    def backspace(cls) -> "Key":
        return cls(KeyKind.BACKSPACE, name="backspace")

    @classmethod
    def other(cls, name: str = "") -> "Key":
        return cls(KeyKind.OTHER, name=name)


def classify(key_name: str, character: Optional[str]) -> Key:
    """
    Map a terminal key event onto a model Key.
    - "backspace" is checked first: its character is a control code.
    - any single printable character (space included) is a character key.
    - everything else (arrows, function keys, ctrl combos) is passthrough.
    """
    if key_name == "backspace":
        return Key.backspace()
    if character is not None and len(character) == 1 and character.isprintable():
        return Key.char_key(character)
    return Key.other(key_name)
