from __future__ import annotations

import logging
import time
from typing import Optional

from editorial.core.config import settings
from editorial.core.errors import ErrorKind, GenerationError, default_message, new_debug_id
from editorial.services.generation.parsing import check_refusal, extract_json, normalize_content, validate_structure
from editorial.services.generation.prompts import BuiltPrompt, build
from editorial.services.generation.providers import ModelProvider, ProviderRegistry
from editorial.services.generation.retry import RetryPolicy, failure_from_error
from editorial.services.generation.types import Failure, GenerationOutcome, GenerationRequest, Success
from editorial.services.generation.variants import VariantSpec, get_variant
from editorial.services.normalizer import (
    ItemNormalizer,
    OutputSanitizer,
    check_minimum_content,
    default_normalizer,
    default_sanitizer,
)

logger = logging.getLogger("uvicorn.error")


def _get_provider(provider: Optional[ModelProvider] = None) -> ModelProvider:
    if provider is not None:
        return provider
    return ProviderRegistry.get((settings.LLM_PROVIDER or "gateway").lower())


def _sanitizer_for(request: GenerationRequest, base: OutputSanitizer) -> OutputSanitizer:
    # brands the user asked to be inspired by must not come back in the output
    if request.variant == "studio" and request.brand_names:
        return base.with_extra_brands(request.brand_names)
    return base


async def _attempt(provider: ModelProvider, prompt: BuiltPrompt, spec: VariantSpec, debug_id: str) -> Success:
    try:
        content = await provider.complete(
            prompt,
            model=spec.model,
            max_tokens=spec.max_tokens,
            temperature=spec.temperature,
            timeout_ms=settings.LLM_TIMEOUT_MS,
        )
        text = normalize_content(content)
        logger.info("generation:response debug_id=%s variant=%s chars=%s", debug_id, spec.name, len(text))
        try:
            obj = extract_json(text, lang=spec.lang)
        except GenerationError as exc:
            logger.warning("generation:parse failed debug_id=%s kind=%s preview=%r", debug_id, exc.kind.value, text[:500])
            raise
        check_refusal(obj, lang=spec.lang)
        payload = validate_structure(obj, spec.required_keys, lang=spec.lang)
    except GenerationError as exc:
        # provider errors carry the default copy; localize it for the variant
        if spec.lang != "pt" and exc.message == default_message(exc.kind):
            raise GenerationError(exc.kind, lang=spec.lang) from exc
        raise
    except Exception:
        logger.exception("generation:unexpected debug_id=%s variant=%s", debug_id, spec.name)
        raise GenerationError(ErrorKind.SERVER_ERROR, lang=spec.lang)
    return Success(payload=payload)


async def generate(
    request: GenerationRequest,
    *,
    debug_id: Optional[str] = None,
    provider: Optional[ModelProvider] = None,
    sanitizer: Optional[OutputSanitizer] = None,
) -> GenerationOutcome:
    """Build, call, extract, validate and sanitize one generation.

    Always returns an outcome; classified failures never escape as exceptions.
    """
    try:
        spec = get_variant(request.variant)
    except KeyError:
        return Failure(
            kind=ErrorKind.INVALID_INPUT,
            message=f"Unknown generation variant: {request.variant}",
            debug_id=debug_id or new_debug_id(),
        )
    debug_id = debug_id or new_debug_id(spec.debug_prefix)
    start = time.perf_counter()

    try:
        prompt = build(request)
        model_provider = _get_provider(provider)
    except GenerationError as exc:
        logger.info("generation:rejected debug_id=%s variant=%s kind=%s", debug_id, spec.name, exc.kind.value)
        return failure_from_error(exc, debug_id)
    except ValueError:
        logger.error("generation:no provider debug_id=%s provider=%s", debug_id, settings.LLM_PROVIDER)
        return Failure(kind=ErrorKind.SERVER_ERROR, message="Model provider unavailable.", debug_id=debug_id)

    logger.info(
        "generation:start debug_id=%s variant=%s mode=%s images=%s brands=%s",
        debug_id,
        spec.name,
        request.mode,
        len(request.visual),
        len(request.brand_names),
    )
    policy = RetryPolicy(settings.GENERATION_SERVICE_RETRIES, name=f"generation:{spec.name}")
    outcome = await policy.run(lambda: _attempt(model_provider, prompt, spec, debug_id), debug_id=debug_id)
    latency_ms = int((time.perf_counter() - start) * 1000)

    if not outcome.ok:
        logger.warning(
            "generation:failed debug_id=%s variant=%s kind=%s latency_ms=%s",
            debug_id,
            spec.name,
            outcome.kind.value,
            latency_ms,
        )
        return outcome

    _sanitizer_for(request, sanitizer or default_sanitizer).sanitize_paths(outcome.payload, spec.sanitize_paths)
    logger.info("generation:ok debug_id=%s variant=%s latency_ms=%s", debug_id, spec.name, latency_ms)
    return outcome


async def generate_capsule(
    raw_text: str,
    *,
    aesthetic_id: Optional[str],
    budget: Optional[str] = None,
    debug_id: Optional[str] = None,
    provider: Optional[ModelProvider] = None,
    normalizer: Optional[ItemNormalizer] = None,
) -> GenerationOutcome:
    """Capsule flow: normalize the owned pieces and gate them before any model call."""
    debug_id = debug_id or new_debug_id(get_variant("capsule").debug_prefix)
    items = (normalizer or default_normalizer).normalize(raw_text)
    if items.notes:
        logger.info("capsule:normalize debug_id=%s notes=%s", debug_id, items.notes)
    try:
        check_minimum_content(raw_text, items, settings.CAPSULE_MIN_ITEMS, settings.CAPSULE_MIN_TEXT_CHARS)
    except GenerationError as exc:
        logger.info("capsule:gate debug_id=%s items=%s", debug_id, len(items.normalized))
        return failure_from_error(exc, debug_id)

    request = GenerationRequest(
        variant="capsule",
        items=items.normalized,
        aesthetic_id=aesthetic_id,
        budget=budget,
    )
    return await generate(request, debug_id=debug_id, provider=provider)
