"""A small client for OpenAI-compatible chat-completion endpoints."""

from __future__ import annotations

import json
import os
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence


class LLMError(Exception):
    """Raised when configuration is missing or a chat request fails."""


@dataclass
class LLMConfig:
    """Endpoint, model and retry settings for an LLM client."""

    api_base: str = "https://llm.example.com/api/paas/v4/"
    api_key: str = field(default="", repr=False)
    model: str = "glm-4-flash"
    temperature: float = 0.2
    max_tokens: Optional[int] = None
    timeout_secs: int = 120
    max_retries: int = 3
    retry_delay_ms: int = 1000

    @classmethod
    def from_env(cls) -> LLMConfig:
        """Defaults overridden by ``LLM_*`` environment variables.

        ``LLM_API_KEY`` is required and must not be blank.
        """
        cfg = cls()
        api_base = os.environ.get("LLM_API_BASE")
        if api_base is not None and api_base.strip():
            cfg.api_base = api_base
        model = os.environ.get("LLM_MODEL")
        if model is not None and model.strip():
            cfg.model = model
        temperature = os.environ.get("LLM_TEMPERATURE")
        if temperature is not None:
            try:
                cfg.temperature = float(temperature.strip())
            except ValueError:
                pass
        api_key = os.environ.get("LLM_API_KEY")
        if api_key is None:
            raise LLMError("missing environment var: LLM_API_KEY")
        if not api_key.strip():
            raise LLMError("LLM_API_KEY_KEY is empty!")
        cfg.api_key = api_key
        return cfg


def _parse_content(text: str) -> str:
    try:
        data = json.loads(text)
        choices = data["choices"]
        if not isinstance(choices, list):
            raise TypeError("choices is not a list")
        contents = []
        for choice in choices:
            message = choice["message"]
            if not isinstance(message["role"], str) or not isinstance(message["content"], str):
                raise TypeError("message role and content must be strings")
            contents.append(message["content"])
    except (ValueError, KeyError, TypeError) as exc:
        raise LLMError(f"LLM response parse error: {exc}; body={text}") from None
    return contents[0] if contents else ""


class LLMClient:
    """Sends chat messages to the configured endpoint, retrying on failure."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @classmethod
    def from_env(cls) -> LLMClient:
        """A client configured from the environment."""
        return cls(LLMConfig.from_env())

    def chat(self, messages: Sequence[tuple[str, str]]) -> str:
        """Send ``(role, content)`` messages and return the first reply."""
        last_error: Optional[str] = None
        retries = self.config.max_retries
        for attempt in range(retries):
            try:
                return self._attempt(messages)
            except (LLMError, OSError) as exc:
                last_error = str(exc)
                if attempt < retries - 1:
                    time.sleep(self.config.retry_delay_ms / 1000)
        raise LLMError("All retries exhausted" if last_error is None else last_error)

    def _attempt(self, messages: Sequence[tuple[str, str]]) -> str:
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": role, "content": content} for role, content in messages],
            "temperature": self.config.temperature,
            "stream": False,
        }
        url = f"{self.config.api_base.rstrip('/')}/chat/completions"
        request = urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.api_key}",
            },
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=self.config.timeout_secs) as resp:
                status, reason, body = resp.status, resp.reason, resp.read()
        except urllib.error.HTTPError as exc:
            status, reason, body = exc.code, exc.reason, exc.read()

        text = body.decode("utf-8", errors="replace") if body else ""
        if not 200 <= status < 300:
            raise LLMError(f"LLM request failed: status={status} {reason} body={text}")
        return _parse_content(text)

    def chat_system_user(self, system: str, user: str) -> str:
        """Send one system and one user message."""
        return self.chat([("system", system), ("user", user)])


def llm_chat(config: LLMConfig, system: str, user: str) -> str:
    """One-shot system/user chat with a fresh client."""
    return LLMClient(config).chat_system_user(system, user)