"""Base model provider: per-call timeout, retries with backoff and a circuit breaker."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass

from ..errors import ProviderError
from ..types import CompletionParams, ModelResponse

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0

    def delay_for(self, attempt: int) -> float:
        """Exponential backoff with a little jitter, capped at ``max_delay``."""
        return min(self.base_delay * 2**attempt + random.uniform(0, 0.1), self.max_delay)


@dataclass
class CircuitBreakerConfig:
    failure_threshold: int = 5
    reset_time: float = 60.0


class CircuitBreaker:
    """Counts consecutive failed calls; refuses calls for ``reset_time`` once tripped."""

    def __init__(self, config: CircuitBreakerConfig, provider: str) -> None:
        self.config = config
        self.provider = provider
        self.failures = 0
        self._opened_at = 0.0

    @property
    def is_open(self) -> bool:
        if self.failures < self.config.failure_threshold:
            return False
        if time.monotonic() - self._opened_at >= self.config.reset_time:
            # half-open: let the next call through
            self.failures = 0
            return False
        return True

    def guard(self) -> None:
        if self.is_open:
            raise ProviderError(
                "PROVIDER_CIRCUIT_OPEN",
                self.provider,
                f"Circuit breaker open after {self.failures} failures",
            )

    def record_success(self) -> None:
        self.failures = 0

    def record_failure(self) -> None:
        self.failures += 1
        self._opened_at = time.monotonic()


class BaseModelProvider:
    """Subclass and implement ``_do_complete`` / ``_do_stream``.

    ``complete`` applies ``params.options.timeout`` to each attempt and retries
    failures per :class:`RetryConfig`. Streams are not retried: chunks already
    delivered cannot be taken back.
    """

    name = "base"

    def __init__(
        self,
        retry: RetryConfig | None = None,
        circuit_breaker: CircuitBreakerConfig | None = None,
    ) -> None:
        self.retry = retry or RetryConfig()
        self.breaker = CircuitBreaker(circuit_breaker or CircuitBreakerConfig(), self.name)

    async def complete(self, params: CompletionParams) -> ModelResponse:
        self.breaker.guard()
        attempts = self.retry.max_retries + 1
        for attempt in range(attempts):
            try:
                response = await self._attempt(params)
            except Exception as e:
                self.breaker.record_failure()
                if attempt == attempts - 1:
                    raise
                delay = self.retry.delay_for(attempt)
                logger.debug(
                    "%s attempt %d/%d failed (%s), retrying in %.2fs",
                    self.name, attempt + 1, attempts, e, delay,
                )
                await asyncio.sleep(delay)
            else:
                self.breaker.record_success()
                return response
        raise AssertionError("unreachable")  # pragma: no cover

    async def stream(self, params: CompletionParams) -> AsyncIterator[str]:
        self.breaker.guard()
        async for chunk in self._do_stream(params):
            yield chunk

    async def _attempt(self, params: CompletionParams) -> ModelResponse:
        timeout = params.options.timeout
        if not timeout:
            return await self._do_complete(params)
        return await asyncio.wait_for(self._do_complete(params), timeout)

    # -- Override these --

    async def _do_complete(self, params: CompletionParams) -> ModelResponse:
        raise NotImplementedError

    async def _do_stream(self, params: CompletionParams) -> AsyncIterator[str]:
        raise NotImplementedError
        yield  # pragma: no cover
