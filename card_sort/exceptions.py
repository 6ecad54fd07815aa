"""
Exception classes for the card sort system.

Centralized location for all custom exceptions to avoid circular imports.
"""


class CardSortError(Exception):
    """Base exception for all card sort errors."""
    pass


class ConfigurationError(CardSortError):
    """Invalid engine or session configuration."""
    pass


class ValidationError(CardSortError):
    """Malformed input to an engine operation or collaborator."""
    pass


class UnknownCardError(CardSortError):
    """A card id that the engine state does not know about."""

    def __init__(self, card_id: str):
        super().__init__(f"Unknown card id: {card_id!r}")
        self.card_id = card_id


class RestoreMismatchError(CardSortError):
    """Snapshot cannot be resumed for the current set of cards."""
    pass


class JudgeError(CardSortError):
    """Base exception for all judge-related errors."""
    pass


class SessionError(CardSortError):
    """Operation is not valid in the current session phase."""
    pass
