"""
Gemini Provider — Google Gemini API implementation.

Uses the google.genai SDK. The client is created on first use, so the
app starts without GEMINI_API_KEY and only /analyze fails.

Each request walks a short model chain (configured model, then
gemini-2.5-flash), retrying transient errors with exponential backoff.
A circuit breaker trips after repeated chain failures and rejects calls
outright until the recovery window passes.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from google import genai
from google.genai import types

from scamradar.config import settings
from scamradar.llm import LLMProvider, MediaPart
from scamradar.logging import get_logger

logger = get_logger("llm.gemini")

FALLBACK_MODEL = "gemini-2.5-flash"

# Attempts per position in the model chain: primary, then fallback
CHAIN_ATTEMPTS = (2, 1)

TRANSIENT_MARKERS = (
    "429", "500", "503", "rate", "quota", "timeout",
    "connection", "unavailable", "overloaded",
)

CLOSED, OPEN, HALF_OPEN = "closed", "open", "half-open"


class CircuitOpenError(Exception):
    """The breaker is open; the model is not being called."""


class CircuitBreaker:
    """
    Consecutive-failure breaker.

    closed    -> calls pass; failures counted
    open      -> calls rejected until recovery_timeout elapses
    half-open -> next call is a probe; success closes, failure reopens
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        recovery_timeout: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self._failures = 0
        self._opened_at: Optional[float] = None

    @property
    def state(self) -> str:
        if self._opened_at is None:
            return CLOSED
        if self._clock() - self._opened_at >= self.recovery_timeout:
            return HALF_OPEN
        return OPEN

    @property
    def is_open(self) -> bool:
        return self.state == OPEN

    def record_success(self) -> None:
        self._failures = 0
        self._opened_at = None

    def record_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.failure_threshold:
            self._opened_at = self._clock()
            logger.warning(
                "Circuit breaker open after %d consecutive failures; "
                "rejecting model calls for %ss",
                self._failures, self.recovery_timeout,
            )


def is_transient(error: Exception) -> bool:
    """Rate limits, overload and network errors are worth retrying."""
    text = str(error).lower()
    return any(marker in text for marker in TRANSIENT_MARKERS)


class GeminiProvider(LLMProvider):
    """Google Gemini provider with a model chain and circuit breaker."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self._api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self._model = model or settings.GEMINI_MODEL
        self._client: Optional[genai.Client] = None
        self.circuit_breaker = circuit_breaker or CircuitBreaker()

    @property
    def models(self) -> tuple[str, ...]:
        if self._model == FALLBACK_MODEL:
            return (self._model,)
        return (self._model, FALLBACK_MODEL)

    def _client_or_raise(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise RuntimeError(
                    "GEMINI_API_KEY not set. Get one from "
                    "https://aistudio.google.com/apikey"
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    @staticmethod
    def _build_contents(prompt: str, media: Optional[list[MediaPart]]) -> list:
        """Text prompt first, then one inline part per attachment."""
        return [prompt] + [
            types.Part.from_bytes(data=m.data, mime_type=m.mime_type)
            for m in media or []
        ]

    @staticmethod
    def _generation_config(
        system_instruction: Optional[str],
        temperature: float,
        json_mode: bool,
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
            response_mime_type="application/json" if json_mode else None,
        )

    async def _attempt(
        self,
        model: str,
        contents: list,
        config: types.GenerateContentConfig,
        attempts: int,
    ) -> str:
        client = self._client_or_raise()
        for attempt in range(attempts):
            try:
                response = await client.aio.models.generate_content(
                    model=model, contents=contents, config=config,
                )
                return response.text or ""
            except Exception as e:
                if attempt + 1 < attempts and is_transient(e):
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise
        raise RuntimeError(f"No attempts made against {model}")

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        json_mode: bool = False,
        media: Optional[list[MediaPart]] = None,
    ) -> str:
        if self.circuit_breaker.is_open:
            raise CircuitOpenError(
                "Model calls suspended after repeated failures. Try again shortly."
            )

        contents = self._build_contents(prompt, media)
        config = self._generation_config(system_instruction, temperature, json_mode)

        errors: list[Exception] = []
        for model, attempts in zip(self.models, CHAIN_ATTEMPTS):
            try:
                text = await self._attempt(model, contents, config, attempts)
            except Exception as e:
                errors.append(e)
                logger.warning(
                    "Gemini model %s failed", model,
                    extra={"error": str(e), "error_type": type(e).__name__},
                )
                continue
            self.circuit_breaker.record_success()
            return text

        self.circuit_breaker.record_failure()
        last = errors[-1]
        if len(errors) > 1:
            raise last from errors[0]
        raise last
