from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from editorial.core.errors import GenerationError
from editorial.services.generation.types import Failure, GenerationOutcome

logger = logging.getLogger("uvicorn.error")

Attempt = Callable[[], Awaitable[GenerationOutcome]]


def failure_from_error(exc: GenerationError, debug_id: Optional[str] = None) -> Failure:
    return Failure(kind=exc.kind, message=exc.message, debug_id=debug_id, retry_after=exc.retry_after)


class RetryPolicy:
    """Bounded retry driven by the error taxonomy.

    Used on both sides of the boundary: the service retries the model call,
    the caller retries the HTTP call. Only retryable kinds are repeated and
    never more than ``max_retries`` times.
    """

    def __init__(
        self,
        max_retries: int = 1,
        delay_s: float = 0.0,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        name: str = "generation",
    ):
        self.max_retries = max(0, max_retries)
        self.delay_s = delay_s
        self._sleep = sleep
        self.name = name

    async def run(self, attempt: Attempt, *, debug_id: Optional[str] = None) -> GenerationOutcome:
        retries = 0
        while True:
            try:
                outcome = await attempt()
            except GenerationError as exc:
                outcome = failure_from_error(exc, debug_id)

            if outcome.ok or not outcome.retryable or retries >= self.max_retries:
                return outcome

            retries += 1
            logger.warning(
                "%s:retry debug_id=%s kind=%s retry=%s/%s",
                self.name,
                outcome.debug_id or debug_id,
                outcome.kind.value,
                retries,
                self.max_retries,
            )
            if self.delay_s > 0:
                await self._sleep(self.delay_s)
