import json
from types import SimpleNamespace

import openai
import pytest
from tenacity import wait_none

from i18n_translate.client import ChatGPTService, create_service, parse_translation
from i18n_translate.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    EmptyTranslationError,
    MalformedResponseError,
    TranslationError,
    TransportError,
)


def _response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _connection_error():
    return openai.APIConnectionError(request=None)


def _bad_request(message):
    # only the attributes APIStatusError reads from the HTTP response
    response = SimpleNamespace(request=None, status_code=400, headers={})
    return openai.BadRequestError(message, response=response, body=None)


class FakeCompletions:
    """Stands in for client.chat.completions; replays scripted replies."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def _service(*replies, **kwargs):
    completions = FakeCompletions(*replies)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    kwargs.setdefault("max_attempts", 1)
    service = ChatGPTService(api_key="sk-test", client=client, **kwargs)
    return service, completions


def test_fenced_reply_is_translated():
    service, _ = _service(
        _response('```json\n[{"original":"hi","translated":"hola"}]\n```')
    )
    assert service.translate("hi", "en", "es") == "hola"


def test_request_wraps_text_as_single_item():
    service, completions = _service(_response('[{"translated": "hola"}]'))

    service.translate('{"greeting": "hi"}', "en", "es")

    call = completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["temperature"] == 0.2
    system, user = call["messages"]
    assert system["role"] == "system"
    assert "Translate from en to es." in system["content"]
    assert "{{variableName}}" in system["content"]
    header, payload = user["content"].split("\n", 1)
    assert header == "inputLanguage=en; outputLanguage=es;"
    assert json.loads(payload) == [{"original": '{"greeting": "hi"}', "translated": ""}]


def test_translation_is_returned_unmodified():
    service, _ = _service(_response('[{"translated": "  hola \\n"}]'))
    assert service.translate("hi", "en", "es") == "  hola \n"


@pytest.mark.parametrize("reply", [
    '[{"original": "hi"}]',
    '[{"original": "hi", "translated": ""}]',
    '[{"original": "hi", "translated": "   "}]',
    '[{"original": "hi", "translated": null}]',
])
def test_missing_or_blank_translation_fails(reply):
    service, _ = _service(_response(reply))
    with pytest.raises(EmptyTranslationError):
        service.translate("hi", "en", "es")


def test_no_choices_fails():
    service, _ = _service(SimpleNamespace(choices=[]))
    with pytest.raises(EmptyResponseError):
        service.translate("hi", "en", "es")


def test_empty_result_list_fails():
    service, _ = _service(_response("[]"))
    with pytest.raises(EmptyResponseError):
        service.translate("hi", "en", "es")


def test_unparseable_reply_fails_and_keeps_raw():
    service, _ = _service(_response("I cannot translate this."))
    with pytest.raises(MalformedResponseError) as excinfo:
        service.translate("hi", "en", "es")
    assert excinfo.value.raw == "I cannot translate this."


def test_missing_content_is_malformed():
    service, _ = _service(_response(None))
    with pytest.raises(MalformedResponseError):
        service.translate("hi", "en", "es")


def test_object_instead_of_array_is_malformed():
    with pytest.raises(MalformedResponseError):
        parse_translation('{"translated": "hola"}')


def test_array_of_strings_is_malformed():
    with pytest.raises(MalformedResponseError):
        parse_translation('["hola"]')


def test_transport_failure_is_distinct_from_response_errors():
    service, _ = _service(_connection_error())
    with pytest.raises(TransportError) as excinfo:
        service.translate("hi", "en", "es")
    assert isinstance(excinfo.value.__cause__, openai.APIConnectionError)
    assert not isinstance(excinfo.value, MalformedResponseError)


def test_transient_failure_is_retried(monkeypatch):
    service, completions = _service(
        _connection_error(),
        _response('[{"translated": "hola"}]'),
        max_attempts=3,
    )
    monkeypatch.setattr(service, "_retry_wait", wait_none())

    assert service.translate("hi", "en", "es") == "hola"
    assert len(completions.calls) == 2


def test_retries_are_bounded(monkeypatch):
    service, completions = _service(
        _connection_error(), _connection_error(), _connection_error(),
        max_attempts=2,
    )
    monkeypatch.setattr(service, "_retry_wait", wait_none())

    with pytest.raises(TransportError):
        service.translate("hi", "en", "es")
    assert len(completions.calls) == 2


def test_rejected_temperature_is_resent_without_it():
    service, completions = _service(
        _bad_request("Unsupported value: 'temperature' does not support 0.2"),
        _response('[{"translated": "hola"}]'),
    )

    assert service.translate("hi", "en", "es") == "hola"
    assert len(completions.calls) == 2
    assert completions.calls[0]["temperature"] == 0.2
    assert "temperature" not in completions.calls[1]
    assert completions.calls[1]["model"] == "gpt-4o-mini"


def test_other_bad_request_is_a_transport_error():
    service, completions = _service(
        _bad_request("Invalid model: gpt-nonexistent"),
        _response('[{"translated": "hola"}]'),
        max_attempts=3,
    )

    with pytest.raises(TransportError) as excinfo:
        service.translate("hi", "en", "es")
    assert isinstance(excinfo.value.__cause__, openai.BadRequestError)
    assert len(completions.calls) == 1


def test_missing_api_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ChatGPTService(api_key="", client=object())


def test_blank_model_falls_back_to_default():
    service = ChatGPTService(api_key="sk-test", model="  ", client=object())
    assert service.model == "gpt-4o-mini"


def test_unknown_service_is_rejected():
    with pytest.raises(ConfigurationError):
        create_service("deepl", api_key="sk-test")


def test_all_failures_are_translation_errors():
    for exc_type in (TransportError, EmptyResponseError, MalformedResponseError,
                     EmptyTranslationError, ConfigurationError):
        assert issubclass(exc_type, TranslationError)
