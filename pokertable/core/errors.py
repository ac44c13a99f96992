"""
Error taxonomy for the PokerTable engine.

- InvalidAction: a rejected action. Recoverable, the caller re-prompts.
- DeckExhausted: more cards dealt than the deck holds. Fatal for the hand.
- AdvisoryFailure: the advisory capability errored or answered garbage.
  Recovered locally by folding the participant.
- StateInvariantViolation: chip conservation or contester bookkeeping is
  broken. Fatal, the engine halts instead of continuing.
"""


class PokerError(Exception):
    """Base class for all engine errors."""


class InvalidAction(PokerError):
    """An action (or decision solicitation) was rejected."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class DeckExhausted(PokerError):
    """Raised when dealing more cards than remain in the deck."""

    def __init__(self, requested: int, remaining: int):
        super().__init__(f"Cannot deal {requested} cards, only {remaining} remain")
        self.requested = requested
        self.remaining = remaining


class AdvisoryFailure(PokerError):
    """The external advisory capability failed or returned a malformed decision."""

    def __init__(self, player_id: str, detail: str):
        super().__init__(f"Advisory decision for {player_id} failed: {detail}")
        self.player_id = player_id
        self.detail = detail


class StateInvariantViolation(PokerError):
    """An internal consistency check failed."""
