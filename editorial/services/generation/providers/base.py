from __future__ import annotations

from typing import Any, Protocol

from editorial.core.errors import ErrorKind, GenerationError
from editorial.services.generation.prompts import BuiltPrompt


class ModelProvider(Protocol):
    async def complete(
        self,
        prompt: BuiltPrompt,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        timeout_ms: int,
    ) -> Any:
        """Return the raw ``message.content`` of the first choice."""
        ...


class ProviderRegistry:
    _providers: dict[str, ModelProvider] = {}

    @classmethod
    def register(cls, name: str, provider: ModelProvider) -> None:
        cls._providers[name] = provider

    @classmethod
    def get(cls, name: str) -> ModelProvider:
        if name not in cls._providers:
            raise ValueError(f"Unknown provider: {name}")
        return cls._providers[name]

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._providers.pop(name, None)


class NullProvider:
    """Stand-in used when no model gateway is configured."""

    name = "disabled"

    async def complete(self, prompt: BuiltPrompt, *, model: str, max_tokens: int, temperature: float, timeout_ms: int) -> Any:
        raise GenerationError(ErrorKind.GATEWAY_ERROR, "Model gateway is not configured.")
