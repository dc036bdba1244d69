"""
Translation service exceptions.

Kept in their own module so client.py, pool.py and main.py can share them
without importing each other.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Base class for everything a translation backend can raise."""


class ConfigurationError(TranslationError):
    """The backend cannot be created (missing API key, unknown service)."""


class TransportError(TranslationError):
    """The call to the model API itself failed."""


class ResponseError(TranslationError):
    """The model answered, but the answer is unusable.

    `raw` holds the model's text (None when there was no text at all) so it
    can be logged for diagnosis.
    """

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class EmptyResponseError(ResponseError):
    """No choices, or an empty list of translation items."""


class MalformedResponseError(ResponseError):
    """The JSON recovered from the response is not a list of translation items."""


class EmptyTranslationError(ResponseError):
    """The first item's "translated" field is missing or blank."""
