from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional

import httpx
import openai
from openai import AsyncOpenAI

from editorial.core.config import settings
from editorial.core.errors import ErrorKind, GenerationError
from editorial.services.generation.prompts import BuiltPrompt

logger = logging.getLogger("uvicorn.error")


class GatewayProvider:
    """Chat-completions client for an OpenAI-compatible model gateway."""

    name = "gateway"

    def __init__(
        self,
        client: Optional[Any] = None,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.client = client
        self.http_client = http_client
        self.base_url = base_url or settings.LLM_GATEWAY_URL
        self.api_key = api_key if api_key is not None else settings.LLM_API_KEY

    def _client(self) -> Any:
        if self.client is None:
            if not self.api_key:
                logger.error("llm:gateway missing api key")
                raise GenerationError(ErrorKind.SERVER_ERROR, "Model gateway is not configured.")
            # retries belong to RetryPolicy only
            self.client = AsyncOpenAI(
                base_url=self.base_url,
                api_key=self.api_key,
                max_retries=0,
                http_client=self.http_client,
            )
        return self.client

    async def complete(
        self,
        prompt: BuiltPrompt,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        timeout_ms: int,
    ) -> Any:
        client = self._client()
        start = time.perf_counter()
        logger.info("llm:gateway request model=%s timeout_ms=%s", model, timeout_ms)
        try:
            resp = await asyncio.wait_for(
                client.chat.completions.create(
                    model=model,
                    messages=prompt.messages(),
                    max_tokens=max_tokens,
                    temperature=temperature,
                ),
                timeout=timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError:
            logger.warning("llm:gateway timeout model=%s timeout_ms=%s", model, timeout_ms)
            raise GenerationError(ErrorKind.NETWORK_ERROR)
        except openai.APIConnectionError as exc:
            logger.warning("llm:gateway connection error model=%s err=%s", model, exc)
            raise GenerationError(ErrorKind.NETWORK_ERROR)
        except openai.APIStatusError as exc:
            logger.error("llm:gateway status=%s model=%s body=%s", exc.status_code, model, str(exc)[:500])
            raise GenerationError(ErrorKind.GATEWAY_ERROR)

        latency_ms = int((time.perf_counter() - start) * 1000)
        tokens_out = getattr(resp.usage, "completion_tokens", 0) if resp.usage else 0
        logger.info("llm:gateway response model=%s latency_ms=%s tokens_out=%s", model, latency_ms, tokens_out)
        if not resp.choices or resp.choices[0].message is None:
            raise GenerationError(ErrorKind.NO_JSON_IN_RESPONSE)
        content = resp.choices[0].message.content
        if not content:
            raise GenerationError(ErrorKind.NO_JSON_IN_RESPONSE)
        return content
