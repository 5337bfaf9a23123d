"""Abstract LLM provider with OpenAI and Anthropic adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from repairflow.config import get_settings


class LLMNotConfiguredError(RuntimeError):
    """Raised when neither OPENAI_API_KEY nor ANTHROPIC_API_KEY is set."""


@dataclass
class LLMResult:
    text: str
    finish_reason: str  # stop | length | other


class LLMProvider(ABC):
    """Abstract interface for chat and vision completions."""

    @abstractmethod
    async def complete(
        self, system: str, prompt: str, temperature: float, max_tokens: int,
    ) -> LLMResult:
        """System + user text completion."""
        ...

    @abstractmethod
    async def analyze_image_url(
        self, system: str, prompt: str, image_url: str, temperature: float, max_tokens: int,
    ) -> LLMResult:
        """Send an image URL + prompt to the LLM."""
        ...


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider."""

    def __init__(self, api_key: str, model: str = "gpt-4o"):
        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def _create(self, messages: list[dict], temperature: float, max_tokens: int) -> LLMResult:
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        choice = resp.choices[0]
        return LLMResult(text=choice.message.content or "", finish_reason=choice.finish_reason or "")

    async def complete(self, system, prompt, temperature, max_tokens):
        return await self._create(
            [{"role": "system", "content": system}, {"role": "user", "content": prompt}],
            temperature, max_tokens,
        )

    async def analyze_image_url(self, system, prompt, image_url, temperature, max_tokens):
        return await self._create(
            [
                {"role": "system", "content": system},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                    ],
                },
            ],
            temperature, max_tokens,
        )


_ANTHROPIC_STOP_REASONS = {"end_turn": "stop", "stop_sequence": "stop", "max_tokens": "length"}


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider."""

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-20250514"):
        from anthropic import AsyncAnthropic
        self.client = AsyncAnthropic(api_key=api_key)
        self.model = model

    async def _create(self, system: str, content: list[dict], temperature: float, max_tokens: int) -> LLMResult:
        resp = await self.client.messages.create(
            model=self.model,
            system=system,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": content}],
        )
        text = "".join(block.text for block in resp.content if getattr(block, "type", "") == "text")
        return LLMResult(text=text, finish_reason=_ANTHROPIC_STOP_REASONS.get(resp.stop_reason, "other"))

    async def complete(self, system, prompt, temperature, max_tokens):
        return await self._create(system, [{"type": "text", "text": prompt}], temperature, max_tokens)

    async def analyze_image_url(self, system, prompt, image_url, temperature, max_tokens):
        return await self._create(
            system,
            [
                {"type": "image", "source": {"type": "url", "url": image_url}},
                {"type": "text", "text": prompt},
            ],
            temperature, max_tokens,
        )


def get_llm_provider(model: str | None = None) -> LLMProvider:
    """Factory: returns OpenAI provider if key available, else Anthropic.

    ``model`` names an OpenAI model; the Anthropic adapter always uses the
    configured Claude model.
    """
    settings = get_settings()
    if settings.openai_api_key:
        return OpenAIProvider(settings.openai_api_key, model or settings.llm.analysis_model)
    if settings.anthropic_api_key:
        return AnthropicProvider(settings.anthropic_api_key, settings.llm.anthropic_model)
    raise LLMNotConfiguredError("No LLM API key configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY.")
