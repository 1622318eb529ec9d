"""
LLM Provider — Abstract Interface

All LLM calls go through this interface. Swap providers
by changing SCAMRADAR_LLM_PROVIDER in env.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MediaPart:
    """Raw bytes attached to a prompt (an uploaded image or audio clip)."""
    data: bytes
    mime_type: str


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        json_mode: bool = False,
        media: Optional[list[MediaPart]] = None,
    ) -> str:
        """Generate a text response from the LLM."""
        ...

    async def generate_json(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.3,
        media: Optional[list[MediaPart]] = None,
    ) -> dict:
        """Generate and parse a JSON response."""
        text = await self.generate(
            prompt=prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            json_mode=True,
            media=media,
        )
        return parse_json_object(text)


def parse_json_object(text: str) -> dict:
    """
    Parse the JSON object embedded in a model reply.

    Models sometimes wrap the object in prose or ```json fences, so the
    span from the first '{' to the last '}' is what gets parsed.
    """
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        raise ValueError(
            f"LLM response contains no JSON object. Raw response: {text[:300]}"
        )
    try:
        parsed = json.loads(text[first:last + 1])
    except json.JSONDecodeError as e:
        raise ValueError(
            f"LLM returned invalid JSON: {e}. Raw response: {text[:300]}"
        ) from e
    if not isinstance(parsed, dict):
        raise ValueError(f"LLM returned non-object JSON. Raw response: {text[:300]}")
    return parsed
