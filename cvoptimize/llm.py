"""Thin wrapper around an OpenAI-compatible chat endpoint returning JSON."""
from __future__ import annotations

import json
from typing import Any

from cvoptimize.config import Settings
from cvoptimize.log import get_logger

log = get_logger(__name__)

_OVERLOAD_MARKERS = ("503", "overloaded", "unavailable", "over capacity")


class LLMError(RuntimeError):
    """Base class for language-model failures."""


class MissingApiKeyError(LLMError):
    pass


class LLMResponseError(LLMError):
    """The model answered but the answer is empty or not the requested JSON."""


def is_overloaded(exc: BaseException) -> bool:
    """True for transient 'service unavailable' signals from the model API."""
    for attr in ("status_code", "status", "code"):
        if str(getattr(exc, attr, "")) == "503":
            return True
    message = str(exc).lower()
    return any(marker in message for marker in _OVERLOAD_MARKERS)


def parse_json_object(raw: str) -> dict[str, Any]:
    """Return the first JSON object found in *raw* (models sometimes add prose)."""
    raw = (raw or "").strip()
    if not raw:
        raise LLMResponseError("Empty response from the language model")
    start = raw.find("{")
    end = raw.rfind("}") + 1
    if start == -1 or end == 0:
        raise LLMResponseError("Language model did not return a JSON object")
    try:
        data = json.loads(raw[start:end])
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"Invalid JSON from language model: {exc}") from exc
    if not isinstance(data, dict):
        raise LLMResponseError("Language model returned JSON that is not an object")
    return data


class LLMClient:
    """Sends one prompt, asks for JSON matching *schema*, returns the parsed dict.

    Pass *client* to substitute the underlying SDK object (tests do).
    """

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        if client is None:
            if not settings.api_key:
                raise MissingApiKeyError(
                    "GROQ_API_KEY is not set. Create a .env file containing "
                    "GROQ_API_KEY=your_key or export it before starting."
                )
            from openai import OpenAI

            # call_with_retry owns retries
            client = OpenAI(
                api_key=settings.api_key, base_url=settings.llm_base_url, max_retries=0
            )
        self._client = client
        self.model = settings.llm_model

    def complete_json(
        self,
        prompt: str,
        schema: dict[str, Any],
        *,
        max_tokens: int = 2000,
        temperature: float = 0.2,
    ) -> dict[str, Any]:
        system = (
            "You answer with a single JSON object and nothing else. "
            "It must validate against this JSON schema:\n"
            + json.dumps(schema, ensure_ascii=False)
        )
        log.debug("Sending prompt to %s (%d chars)", self.model, len(prompt))
        resp = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            max_tokens=max_tokens,
            temperature=temperature,
        )
        raw = resp.choices[0].message.content or ""
        return parse_json_object(raw)
