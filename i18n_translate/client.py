"""
Translation backends.

TranslationService is the only thing the worker pool knows about: one call,
text in, translated text out, TranslationError on any failure. ChatGPTService
implements it on top of the OpenAI chat completions API, with bounded retry
for transient errors and JSON recovery from the free-form reply.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import openai
from openai import OpenAI
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

import config
from i18n_translate.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    EmptyTranslationError,
    MalformedResponseError,
    TransportError,
)
from i18n_translate.extract import extract_json_region
from i18n_translate.prompts import build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)

# Errors worth another attempt. APITimeoutError is an APIConnectionError.
_TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class TranslationService(ABC):
    """A backend that translates one document at a time."""

    @abstractmethod
    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate `text` and return the non-empty result.

        Raises:
            TranslationError: on any failure; never returns an empty string.
        """


class ChatGPTService(TranslationService):
    """OpenAI chat-completions backend."""

    _retry_wait = wait_exponential(multiplier=1, min=2, max=30)

    def __init__(
        self,
        api_key: str,
        model: str = config.MODEL,
        temperature: float = config.TEMPERATURE,
        max_attempts: int = config.MAX_ATTEMPTS,
        client: Any = None,
    ):
        if not api_key:
            raise ConfigurationError("chatgpt api key is required")
        if not model or not model.strip():
            model = config.MODEL
        self.model = model.strip()
        self.temperature = temperature
        self.max_attempts = max(1, max_attempts)
        self._client = client if client is not None else OpenAI(api_key=api_key)

    # ── Transport ─────────────────────────────────────────────────────────────

    def _create(self, messages: list[dict]) -> Any:
        # Some newer models only accept the default temperature (1).
        # Try with the configured temperature first; if the API rejects it,
        # send again without the parameter.
        try:
            return self._client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=messages,
            )
        except openai.BadRequestError as e:
            if "temperature" in str(e):
                return self._client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                )
            raise

    def _complete(self, messages: list[dict]) -> Any:
        retrying = Retrying(
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            wait=self._retry_wait,
            stop=stop_after_attempt(self.max_attempts),
            before_sleep=lambda state: logger.warning(
                "Model call failed (%s), retrying (attempt %d of %d)",
                state.outcome.exception(),
                state.attempt_number + 1,
                self.max_attempts,
            ),
            reraise=True,
        )
        try:
            return retrying(self._create, messages)
        except openai.OpenAIError as exc:
            raise TransportError(f"chatgpt request failed: {exc}") from exc

    # ── Public API ────────────────────────────────────────────────────────────

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        messages = [
            {"role": "system", "content": build_system_prompt(source_lang, target_lang)},
            {"role": "user",   "content": build_user_prompt(text, source_lang, target_lang)},
        ]
        response = self._complete(messages)

        if not response.choices:
            raise EmptyResponseError("empty chatgpt response")

        raw = (response.choices[0].message.content or "").strip()
        return parse_translation(raw)


def parse_translation(raw: str) -> str:
    """
    Pull the first item's "translated" value out of a raw model reply.

    Raises:
        MalformedResponseError: the recovered JSON is not a list of objects.
        EmptyResponseError:     the list is empty.
        EmptyTranslationError:  "translated" is missing, not a string, or blank.
    """
    json_text = extract_json_region(raw)
    try:
        items = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Model returned non-JSON output: {exc}", raw) from exc

    if not isinstance(items, list):
        raise MalformedResponseError(
            f"Expected a JSON array, got: {type(items).__name__}", raw
        )
    if not items:
        raise EmptyResponseError("no translations returned", raw)

    first = items[0]
    if not isinstance(first, dict):
        raise MalformedResponseError(
            f"Expected translation objects, got: {type(first).__name__}", raw
        )

    translated = first.get("translated")
    if not isinstance(translated, str) or not translated.strip():
        raise EmptyTranslationError("translated is empty in chatgpt result", raw)
    return translated


_SERVICES = {
    "chatgpt": ChatGPTService,
}


def create_service(
    name: str,
    api_key: str,
    model: str = config.MODEL,
    temperature: float = config.TEMPERATURE,
    max_attempts: int = config.MAX_ATTEMPTS,
) -> TranslationService:
    """Instantiate the backend registered under `name`."""
    try:
        service_cls = _SERVICES[name]
    except KeyError:
        raise ConfigurationError(f"Unsupported translation service: {name}") from None
    return service_cls(
        api_key=api_key,
        model=model,
        temperature=temperature,
        max_attempts=max_attempts,
    )


def available_services() -> list[str]:
    return sorted(_SERVICES)
