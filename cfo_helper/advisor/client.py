"""Model client - one text completion per call.

Gemini is reached through its OpenAI-compatible endpoint, so the OpenAI SDK
does the HTTP work. Parameters that the OpenAI schema lacks (top_k, safety
settings) travel in the provider-specific extra body.
"""
from typing import Any, Dict, Optional, Protocol
from openai import AsyncOpenAI

from cfo_helper.config import settings
from cfo_helper.advisor.schemas import GenerationConfig


class ModelClient(Protocol):
    """Anything that can turn a prompt into text with a named model."""

    async def generate(self, model: str, prompt: str, config: GenerationConfig) -> str:
        ...


def get_openai_client() -> AsyncOpenAI:
    """Get an OpenAI SDK client pointed at the Gemini endpoint."""
    return AsyncOpenAI(api_key=settings.GEMINI_API_KEY, base_url=settings.GEMINI_BASE_URL)


def build_request(model: str, prompt: str, config: GenerationConfig) -> Dict[str, Any]:
    """Build chat.completions.create kwargs for a single-prompt call."""
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": config.temperature,
        "top_p": config.top_p,
        "max_tokens": config.max_output_tokens,
        "extra_body": {
            "extra_body": {
                "google": {
                    "top_k": config.top_k,
                    "safety_settings": [
                        {"category": s.category.value, "threshold": s.threshold.value}
                        for s in config.safety_settings
                    ],
                }
            }
        },
    }


class GeminiModelClient:
    """Default ModelClient. Errors propagate to the caller's fallback loop."""

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    async def generate(self, model: str, prompt: str, config: GenerationConfig) -> str:
        response = await self.client.chat.completions.create(**build_request(model, prompt, config))
        return response.choices[0].message.content or ""
