"""OpenAI Chat Completions helper."""

from __future__ import annotations

from typing import Dict, List

from openai import OpenAI

from pickledger.config import get_openai_api_key, get_settings

_client: OpenAI | None = None


def get_client() -> OpenAI:
    global _client
    if _client is None:
        _client = OpenAI(api_key=get_openai_api_key())
    return _client


def chat_completion(messages: List[Dict[str, str]], temperature: float = 0.3) -> str:
    response = get_client().chat.completions.create(
        model=get_settings().openai_model,
        temperature=temperature,
        messages=messages,
    )
    return response.choices[0].message.content or ""
