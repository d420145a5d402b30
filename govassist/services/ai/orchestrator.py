"""AI orchestrator: cache lookup, provider selection, fallback and cache write.

Providers are tried in a fixed preference order. A failing primary is
retried on every request; there is no failure-rate memory.
"""

import hashlib
import json
import time
from typing import List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from govassist.core.cache import ResponseCache
from govassist.core.constants import (
    AI_CACHE_PATTERN,
    AI_CACHE_PREFIX,
    AI_CACHE_TTL_SECONDS,
    CACHED_MODEL_SUFFIX,
    NO_MODEL_NAME,
    NO_MODELS_ERROR,
)
from govassist.core.exceptions import CacheError
from govassist.schemas.ai import AIRequest, ModelStatus, ProcessingResult
from govassist.services.ai.providers.base import ProviderAdapter
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)


def cache_key(request: AIRequest) -> str:
    """Cache key derived from the message and the declared language only."""
    payload = {
        "message": request.message,
        "language": request.language.value if request.language else None,
    }
    digest = hashlib.sha256(json.dumps(payload, sort_keys=True, ensure_ascii=False).encode("utf-8")).hexdigest()
    return f"{AI_CACHE_PREFIX}{digest}"


class AIOrchestrator:
    """Routes a request to the first enabled provider, with one fallback."""

    def __init__(self, providers: Sequence[ProviderAdapter], cache: Optional[ResponseCache] = None):
        """Initialize the orchestrator.

        Args:
            providers: Adapters in preference order
            cache: Response cache, or None to run uncached
        """
        self.providers = list(providers)
        self.cache = cache

    async def process(self, request: AIRequest) -> ProcessingResult:
        """Answer a request.

        Args:
            request: Validated AI request

        Returns:
            ProcessingResult: The cached, primary or fallback result. When no
            provider is enabled, an unsuccessful result with model ``none``.
        """
        started = time.perf_counter()
        key = cache_key(request)

        cached = await self._read_cache(key)
        if cached is not None:
            LOGGER.info("AI response served from cache", extra={"model_used": cached.model_used})
            return cached

        enabled = [provider for provider in self.providers if provider.is_enabled]
        if not enabled:
            LOGGER.warning("No AI providers enabled")
            return ProcessingResult(
                success=False,
                error=NO_MODELS_ERROR,
                processing_time=0,
                model_used=NO_MODEL_NAME,
            )

        primary = enabled[0]
        result = await primary.generate_answer(request)

        if not result.success and len(enabled) > 1:
            fallback = enabled[1]
            LOGGER.warning(
                "Primary provider failed, falling back",
                extra={"primary": primary.name, "fallback": fallback.name, "error": result.error},
            )
            result = await fallback.generate_answer(request)

        if result.success:
            await self._write_cache(key, result)
        else:
            LOGGER.error(
                "All AI providers failed",
                extra={"model_used": result.model_used, "error": result.error},
            )

        LOGGER.info(
            "AI request processed",
            extra={
                "success": result.success,
                "model_used": result.model_used,
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return result

    def model_status(self) -> List[ModelStatus]:
        return [
            ModelStatus(
                name=provider.name,
                provider=provider.provider,
                enabled=provider.is_enabled,
                status="available" if provider.is_enabled else "disabled",
            )
            for provider in self.providers
        ]

    async def clear_cache(self, pattern: str = AI_CACHE_PATTERN) -> int:
        """Delete cached responses matching ``pattern``.

        Patterns outside the ``ai:`` keyspace are rejected.

        Raises:
            CacheError: If no cache is configured or Redis fails
            ValueError: If the pattern does not target AI responses
        """
        if not pattern.startswith(AI_CACHE_PREFIX):
            raise ValueError(f"Pattern must start with '{AI_CACHE_PREFIX}'")
        if self.cache is None:
            raise CacheError("Response cache is not configured")

        cleared = await self.cache.delete_pattern(pattern)
        LOGGER.info("AI cache cleared", extra={"pattern": pattern, "cleared": cleared})
        return cleared

    async def _read_cache(self, key: str) -> Optional[ProcessingResult]:
        if self.cache is None:
            return None
        try:
            raw = await self.cache.get(key)
        except CacheError as e:
            LOGGER.warning("Cache read failed", extra={"key": key, "error": str(e)})
            return None
        if raw is None:
            return None

        try:
            result = ProcessingResult.model_validate_json(raw)
        except PydanticValidationError as e:
            LOGGER.warning("Discarding unreadable cache entry", extra={"key": key, "error": str(e)})
            return None

        result.model_used = f"{result.model_used}{CACHED_MODEL_SUFFIX}"
        return result

    async def _write_cache(self, key: str, result: ProcessingResult) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.setex(key, AI_CACHE_TTL_SECONDS, result.model_dump_json())
        except CacheError as e:
            LOGGER.warning("Cache write failed", extra={"key": key, "error": str(e)})
