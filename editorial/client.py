from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from editorial.core.config import settings
from editorial.core.errors import ErrorKind, default_message
from editorial.services.generation.retry import RetryPolicy
from editorial.services.generation.types import Failure, GenerationOutcome, Success
from editorial.services.generation.variants import VariantSpec, get_variant

logger = logging.getLogger("uvicorn.error")

DEFAULT_RETRY_AFTER_S = 60


class EditorialClient:
    """Caller side of the generation boundary.

    Posts one body per submission and maps every HTTP result onto a
    GenerationOutcome. Transient kinds get one delayed retry; everything
    else comes straight back for the user to act on.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        http: Optional[httpx.AsyncClient] = None,
        token: Optional[str] = None,
        retries: Optional[int] = None,
        delay_s: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        timeout_s: float = 150.0,
    ):
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout_s)
        self.token = token
        self.retries = settings.GENERATION_CLIENT_RETRIES if retries is None else retries
        self.delay_s = settings.GENERATION_CLIENT_RETRY_DELAY_S if delay_s is None else delay_s
        self._sleep = sleep
        self.attempts = 0

    async def __aenter__(self) -> "EditorialClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def generate(self, variant: str, body: Dict[str, Any]) -> GenerationOutcome:
        spec = get_variant(variant)
        policy = RetryPolicy(self.retries, self.delay_s, sleep=self._sleep, name=f"client:{variant}")
        return await policy.run(lambda: self._post(spec, body))

    async def generate_capsule(
        self, owned_items_text: str, aesthetic_id: str, budget: Optional[str] = None
    ) -> GenerationOutcome:
        body = {"owned_items_text": owned_items_text, "aesthetic_id": aesthetic_id, "budget": budget}
        return await self.generate("capsule", body)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _post(self, spec: VariantSpec, body: Dict[str, Any]) -> GenerationOutcome:
        self.attempts += 1
        path = f"{settings.API_PREFIX}/generate/{spec.name}"
        try:
            resp = await self.http.post(path, json=body, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("client:%s transport error err=%s", spec.name, exc)
            return _failure(ErrorKind.NETWORK_ERROR, spec)
        return interpret_response(resp, spec)


def _failure(kind: ErrorKind, spec: VariantSpec, **extra: Any) -> Failure:
    return Failure(kind=kind, message=extra.pop("message", None) or default_message(kind, spec.lang), **extra)


def _retry_after(resp: httpx.Response, data: Any) -> int:
    value = data.get("retry_after") if isinstance(data, dict) else None
    if value is None:
        value = resp.headers.get("retry-after")
    try:
        return int(value) if value is not None else DEFAULT_RETRY_AFTER_S
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_S


def interpret_response(resp: httpx.Response, spec: VariantSpec) -> GenerationOutcome:
    try:
        data = resp.json()
    except ValueError:
        data = None

    if resp.status_code == 429:
        return _failure(
            ErrorKind.RATE_LIMITED,
            spec,
            message=data.get("message") if isinstance(data, dict) else None,
            retry_after=_retry_after(resp, data),
        )
    if resp.status_code == 401:
        return _failure(ErrorKind.UNAUTHORIZED, spec)

    if isinstance(data, dict) and data.get("error"):
        return _failure(
            ErrorKind.parse(data["error"]),
            spec,
            message=data.get("message"),
            debug_id=data.get("debug_id"),
        )
    if resp.status_code >= 500:
        return _failure(ErrorKind.SERVER_ERROR, spec)
    if resp.status_code >= 400:
        return _failure(ErrorKind.GATEWAY_ERROR, spec)
    if data is None:
        return _failure(ErrorKind.MALFORMED_JSON, spec)
    if not isinstance(data, dict) or any(data.get(k) is None for k in spec.required_keys):
        return _failure(ErrorKind.INCOMPLETE_STRUCTURE, spec)
    return Success(payload=data)
