import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from editorial.auth.deps import require_caller
from editorial.core.errors import ErrorKind, GenerationError, http_status_for, new_debug_id
from editorial.core.ratelimit import enforce_rate_limit
from editorial.schemas.generate import CapsuleIn, ErrorOut, GenerateIn
from editorial.services import generation
from editorial.services.generation.types import GenerationOutcome
from editorial.services.generation.variants import get_variant
from editorial.services.preflight import build_request

router = APIRouter(prefix="/generate", tags=["generate"])

logger = logging.getLogger("uvicorn.error")


def error_response(
    kind: ErrorKind,
    message: str,
    debug_id: Optional[str] = None,
    retry_after: Optional[int] = None,
) -> JSONResponse:
    body = ErrorOut(error=kind.value, message=message, debug_id=debug_id, retry_after=retry_after)
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
    return JSONResponse(
        body.model_dump(exclude_none=True),
        status_code=http_status_for(kind),
        headers=headers,
    )


def outcome_response(outcome: GenerationOutcome) -> JSONResponse:
    if outcome.ok:
        return JSONResponse(outcome.payload)
    return error_response(outcome.kind, outcome.message, outcome.debug_id, outcome.retry_after)


@router.post("/capsule", dependencies=[Depends(enforce_rate_limit)])
async def generate_capsule(payload: CapsuleIn, subject: Optional[str] = Depends(require_caller)):
    debug_id = new_debug_id(get_variant("capsule").debug_prefix)
    logger.info("[%s] capsule request chars=%s", debug_id, len(payload.owned_items_text or ""))
    outcome = await generation.generate_capsule(
        payload.owned_items_text,
        aesthetic_id=payload.aesthetic_id,
        budget=payload.budget,
        debug_id=debug_id,
    )
    return outcome_response(outcome)


@router.post("/{variant}", dependencies=[Depends(enforce_rate_limit)])
async def generate_variant(variant: str, payload: GenerateIn, subject: Optional[str] = Depends(require_caller)):
    try:
        spec = get_variant(variant)
    except KeyError:
        raise HTTPException(status_code=404, detail="unknown variant")
    debug_id = new_debug_id(spec.debug_prefix)
    logger.info(
        "[%s] %s request images=%s brands=%s",
        debug_id,
        variant,
        len(payload.images),
        len(payload.brandRefs),
    )
    try:
        request = build_request(variant, payload)
    except GenerationError as exc:
        logger.info("[%s] %s rejected kind=%s", debug_id, variant, exc.kind.value)
        return error_response(exc.kind, exc.message, debug_id)
    outcome = await generation.generate(request, debug_id=debug_id)
    return outcome_response(outcome)
