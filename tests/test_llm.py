import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from lunareact.llm import LLMClient, LLMConfig, LLMError, llm_chat


class _FakeResponse:
    def __init__(self, body, status=200, reason="OK"):
        self._body = body
        self.status = status
        self.reason = reason

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _reply(content):
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    return _FakeResponse(json.dumps(body).encode("utf-8"))


def _config(**overrides):
    values = {"api_base": "http://localhost:8000/v1/", "api_key": "placeholder"}
    values.update(overrides)
    return LLMConfig(**values)


def test_config_default():
    cfg = LLMConfig()
    assert cfg.model == "glm-4-flash"
    assert cfg.temperature == 0.2
    assert cfg.timeout_secs == 120
    assert cfg.max_retries == 3
    assert cfg.retry_delay_ms == 1000
    assert cfg.max_tokens is None


def test_from_env_reads_variables(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "placeholder")
    monkeypatch.setenv("LLM_MODEL", "tiny-model")
    monkeypatch.setenv("LLM_API_BASE", "http://localhost:9000/")
    monkeypatch.setenv("LLM_TEMPERATURE", " 0.7 ")
    cfg = LLMConfig.from_env()
    assert cfg.api_key == "placeholder"
    assert cfg.model == "tiny-model"
    assert cfg.api_base == "http://localhost:9000/"
    assert cfg.temperature == 0.7


def test_from_env_ignores_blank_and_invalid(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "placeholder")
    monkeypatch.setenv("LLM_MODEL", "   ")
    monkeypatch.setenv("LLM_TEMPERATURE", "warm")
    monkeypatch.delenv("LLM_API_BASE", raising=False)
    cfg = LLMConfig.from_env()
    default = LLMConfig()
    assert cfg.model == default.model
    assert cfg.temperature == default.temperature
    assert cfg.api_base == default.api_base


def test_from_env_missing_key(monkeypatch):
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    with pytest.raises(LLMError, match="missing environment var: LLM_API_KEY"):
        LLMConfig.from_env()


def test_from_env_blank_key(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "  ")
    with pytest.raises(LLMError, match="is empty"):
        LLMClient.from_env()


def test_chat_sends_request_and_returns_content():
    with patch("urllib.request.urlopen", return_value=_reply("hi there")) as urlopen:
        answer = LLMClient(_config()).chat_system_user("be brief", "hello")
    assert answer == "hi there"
    request = urlopen.call_args[0][0]
    assert request.full_url == "http://localhost:8000/v1/chat/completions"
    assert request.get_header("Authorization") == "Bearer placeholder"
    body = json.loads(request.data)
    assert body["stream"] is False
    assert body["model"] == "glm-4-flash"
    assert body["messages"] == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hello"},
    ]
    assert urlopen.call_args[1]["timeout"] == 120


def test_empty_choices_gives_empty_string():
    response = _FakeResponse(b'{"choices": []}')
    with patch("urllib.request.urlopen", return_value=response):
        assert llm_chat(_config(), "s", "u") == ""


def test_retries_then_succeeds():
    with patch("time.sleep") as sleep, patch(
        "urllib.request.urlopen",
        side_effect=[urllib.error.URLError("refused"), _reply("ok")],
    ) as urlopen:
        assert LLMClient(_config()).chat([("user", "hello")]) == "ok"
    assert urlopen.call_count == 2
    sleep.assert_called_once_with(1.0)


def test_http_error_reported_after_retries():
    def fail(*args, **kwargs):
        return (_ for _ in ()).throw(
            urllib.error.HTTPError(
                "http://localhost:8000/v1/chat/completions",
                500,
                "Internal Server Error",
                {},
                io.BytesIO(b"boom"),
            )
        )

    with patch("time.sleep") as sleep, patch("urllib.request.urlopen", side_effect=fail) as urlopen:
        with pytest.raises(LLMError, match="LLM request failed: status=500") as info:
            LLMClient(_config(max_retries=2)).chat([("user", "hello")])
    assert "body=boom" in str(info.value)
    assert urlopen.call_count == 2
    assert sleep.call_count == 1


def test_malformed_body_is_parse_error():
    response = _FakeResponse(b"not json")
    with patch("time.sleep"), patch("urllib.request.urlopen", return_value=response):
        with pytest.raises(LLMError, match="LLM response parse error") as info:
            LLMClient(_config(max_retries=1)).chat([("user", "hello")])
    assert "body=not json" in str(info.value)


def test_zero_retries_exhausted():
    with patch("urllib.request.urlopen") as urlopen:
        with pytest.raises(LLMError, match="All retries exhausted"):
            LLMClient(_config(max_retries=0)).chat([("user", "hello")])
    assert urlopen.call_count == 0