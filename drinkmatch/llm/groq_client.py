from __future__ import annotations

import json
import logging
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)


def is_available(config: LLMConfig = DEFAULT_LLM_CONFIG) -> bool:
    return config.enabled and bool(config.api_key)


def complete_json(
    system_prompt: str,
    user_content: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    temperature: float = 0.1,
) -> dict[str, Any]:
    """
    Ask Groq for a JSON object.

    Returns the parsed object, or an empty dict on any failure
    (disabled config, timeout, API error, bad JSON, non-object payload).
    """
    if not is_available(config):
        return {}

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            max_tokens=config.max_tokens,
            temperature=temperature,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or "{}"
        parsed = json.loads(content)
        if not isinstance(parsed, dict):
            logger.warning("Groq returned a non-object JSON payload, ignoring it")
            return {}
        return parsed

    except Exception:
        logger.warning("Groq JSON completion failed, falling back", exc_info=True)
        return {}


def complete_text(
    system_prompt: str,
    user_content: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    temperature: float = 0.5,
    max_tokens: int = 128,
) -> str:
    """Plain-text completion; empty string on any failure."""
    if not is_available(config):
        return ""

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return (response.choices[0].message.content or "").strip()

    except Exception:
        logger.warning("Groq text completion failed, falling back", exc_info=True)
        return ""
