from __future__ import annotations


class ContractViolation(AssertionError):
    """Raised when a caller breaks the challenge state machine's contract.

    These are programming errors in the surrounding input loop, never
    something a player can trigger by typing.
    """
