"""Exception types raised by the PickLedger core."""

from __future__ import annotations


class PickLedgerError(Exception):
    """Base class for domain errors."""


class OddsParseError(PickLedgerError, ValueError):
    """An odds string did not contain a usable American-odds integer."""

    def __init__(self, odds: object) -> None:
        super().__init__(f"Unparseable American odds: {odds!r}")
        self.odds = odds


class InsufficientLegsError(PickLedgerError):
    """A parlay calculation had fewer than two legs with valid odds."""

    def __init__(self, valid_legs: int, required: int = 2) -> None:
        super().__init__(f"Parlay requires at least {required} legs with valid odds (got {valid_legs})")
        self.valid_legs = valid_legs
        self.required = required


class UnresolvedEntityError(PickLedgerError, LookupError):
    """No canonical team or player matched the given name."""

    def __init__(self, name: str, kind: str = "player") -> None:
        super().__init__(f"Could not resolve {kind}: {name}")
        self.name = name
        self.kind = kind


class InvalidStatusTransition(PickLedgerError):
    def __init__(self, current: str | None, new: str) -> None:
        super().__init__(f"Cannot move a pick from {current!r} to {new!r}")
        self.current = current
        self.new = new


class PickGenerationError(PickLedgerError):
    """The AI collaborator returned content that could not be turned into picks."""
