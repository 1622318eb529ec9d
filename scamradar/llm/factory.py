"""
LLM Provider — factory.
"""

from typing import Optional

from scamradar.llm import LLMProvider


def get_provider(provider_name: str = "gemini", **kwargs: Optional[str]) -> LLMProvider:
    """Factory — returns the configured LLM provider."""
    if provider_name == "gemini":
        from scamradar.llm.gemini import GeminiProvider
        return GeminiProvider(**kwargs)
    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
