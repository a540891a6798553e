"""
Exceptions raised by the learning engine and by card stores.
"""


class EngineError(Exception):
    """Base class for every error the engine raises."""


class ValidationError(EngineError):
    def __init__(self, message: str):
        super().__init__(f"Validation error: {message}")
        self.message = message


class NotFound(EngineError):
    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} '{key}' not found")
        self.entity = entity
        self.key = key


class StoreError(EngineError):
    """Opaque failure of the card store, with the profile and card involved."""

    def __init__(self, message: str, profile: str | None = None, word_name: str | None = None):
        context = []
        if profile is not None:
            context.append(f"profile={profile}")
        if word_name is not None:
            context.append(f"word={word_name}")
        suffix = f" ({', '.join(context)})" if context else ""
        super().__init__(f"Store error: {message}{suffix}")
        self.message = message
        self.profile = profile
        self.word_name = word_name


class SessionStateError(EngineError):
    """An operation was attempted in a session phase that does not allow it."""
