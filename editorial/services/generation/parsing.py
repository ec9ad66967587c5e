from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable

from editorial.core.errors import ErrorKind, GenerationError

logger = logging.getLogger("uvicorn.error")

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)

REFUSAL_KINDS = {
    "selfie_not_allowed": ErrorKind.SELFIE_NOT_ALLOWED,
    "content_not_allowed": ErrorKind.CONTENT_NOT_ALLOWED,
}


def normalize_content(content: Any) -> str:
    """Flatten whatever the provider put in ``message.content`` into plain text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    if isinstance(content, dict) and isinstance(content.get("text"), str):
        return content["text"]
    return str(content)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def extract_json(text: str, *, lang: str = "pt") -> Dict[str, Any]:
    """Pull the JSON object out of a model reply.

    Fenced blocks are unwrapped first. If the whole reply does not parse, the
    widest ``{...}`` span is tried. A reply that parses as JSON but is not an
    object is malformed, even when it holds no brace pair; text with no
    parseable span is missing JSON.
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise GenerationError(ErrorKind.NO_JSON_IN_RESPONSE, lang=lang)

    try:
        parsed = json.loads(cleaned)
    except ValueError:
        parsed = None
    else:
        if isinstance(parsed, dict):
            return parsed

    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        kind = ErrorKind.MALFORMED_JSON if parsed is not None else ErrorKind.NO_JSON_IN_RESPONSE
        raise GenerationError(kind, lang=lang)

    try:
        candidate = json.loads(cleaned[start : end + 1])
    except ValueError:
        # valid JSON of the wrong shape is malformed, not missing
        kind = ErrorKind.MALFORMED_JSON if parsed is not None else ErrorKind.NO_JSON_IN_RESPONSE
        raise GenerationError(kind, lang=lang)
    if not isinstance(candidate, dict):
        raise GenerationError(ErrorKind.MALFORMED_JSON, lang=lang)
    return candidate


def check_refusal(obj: Dict[str, Any], *, lang: str = "pt") -> None:
    """Raise the policy kind when the model answered with a refusal object."""
    marker = obj.get("error")
    if isinstance(marker, str) and marker in REFUSAL_KINDS:
        raise GenerationError(REFUSAL_KINDS[marker], lang=lang)


def validate_structure(obj: Dict[str, Any], required_keys: Iterable[str], *, lang: str = "pt") -> Dict[str, Any]:
    missing = [k for k in required_keys if obj.get(k) is None]
    if missing:
        logger.warning("parse:missing keys=%s present=%s", missing, sorted(obj)[:20])
        raise GenerationError(ErrorKind.INCOMPLETE_STRUCTURE, lang=lang)
    return obj
