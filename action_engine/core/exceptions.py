"""Core exception types shared across layers."""


class IntentLookupError(Exception):
    """Base error for intent resolution failures surfaced as error responses."""


class InvalidIntentPrefixError(IntentLookupError):
    """Raised when an intent name does not start with the configured prefix."""


class IntentNotFoundError(IntentLookupError):
    """Raised when no intent is registered under a well-prefixed name."""


class RegistryFrozenError(RuntimeError):
    """Raised when registering an intent after the registry has been frozen."""


class ReplyAlreadyResolvedError(RuntimeError):
    """Raised when a handler resolves its reply more than once."""


class MissingPossibleIntentsError(ValueError):
    """Raised when a continued response names no possible next intents."""


class IntentLoadError(Exception):
    """Raised at setup time when an intent definition cannot be loaded."""


__all__ = [
    "IntentLookupError",
    "InvalidIntentPrefixError",
    "IntentNotFoundError",
    "RegistryFrozenError",
    "ReplyAlreadyResolvedError",
    "MissingPossibleIntentsError",
    "IntentLoadError",
]
