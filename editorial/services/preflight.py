from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from editorial.core.config import settings
from editorial.core.errors import ErrorKind, GenerationError
from editorial.schemas.generate import GenerateIn
from editorial.services.generation.types import BrandInfo, GenerationRequest, Preferences
from editorial.services.generation.variants import get_variant

ALLOWED_OCCASIONS = ("trabalho", "casual", "date", "noite", "viagem")
ALLOWED_PRICE_RANGES = ("acessivel", "medio", "premium", "misturar")
ALLOWED_REGIONS = ("brasil", "global")
ALLOWED_INTENSITIES = ("suave", "medio", "marcante")

TRUSTED_IMAGE_HOSTS = (
    re.compile(r"images\.unsplash\.com", re.IGNORECASE),
    re.compile(r"images\.pexels\.com", re.IGNORECASE),
    re.compile(r"i\.pinimg\.com", re.IGNORECASE),
    re.compile(r"cdn\.pixabay\.com", re.IGNORECASE),
)
_IMAGE_EXT_RE = re.compile(r"\.(png|jpe?g|webp)(\?.*)?$", re.IGNORECASE)
_PIN_PAGE_RE = re.compile(r"pinterest\.[a-z.]+/pin/", re.IGNORECASE)

IMAGE_COUNT = 3

_MESSAGES = {
    "need_exactly_3": {
        "pt": "Envie exatamente 3 imagens (upload) ou cole 3 URLs.",
        "en": "Upload exactly 3 images or paste 3 URLs.",
    },
    "pinterest_pin_page": {
        "pt": "Esse link é uma página do Pinterest, não uma imagem direta. Use um link i.pinimg.com/...jpg/.png ou faça upload da imagem.",
        "en": "That link is a Pinterest page, not a direct image. Use an i.pinimg.com/...jpg/.png link or upload the image.",
    },
    "not_direct_image": {
        "pt": "Cole links diretos de imagem terminando em .jpg, .png ou .webp (ex.: i.pinimg.com/...jpg).",
        "en": "Paste direct image links ending in .jpg, .png or .webp (e.g. i.pinimg.com/...jpg).",
    },
    "invalid_image": {
        "pt": "Formato de imagem inválido.",
        "en": "Invalid image format.",
    },
    "image_too_large": {
        "pt": "Imagem muito grande (máx. 10MB).",
        "en": "Image too large (max 10MB).",
    },
    "brand_count": {
        "pt": "Informe de 2 a 3 marcas de referência.",
        "en": "Provide 2 to 3 reference brands.",
    },
    "no_references": {
        "pt": "Envie imagens ou pelo menos 2 marcas de referência.",
        "en": "Provide images or at least 2 reference brands.",
    },
}


def _reject(code: str, lang: str) -> GenerationError:
    return GenerationError(ErrorKind.INVALID_INPUT, _MESSAGES[code].get(lang, _MESSAGES[code]["pt"]), lang=lang)


def _pick(value: Any, allowed: tuple, default: str) -> str:
    return value if value in allowed else default


def sanitize_preferences(prefs: Optional[Dict[str, Any]]) -> Preferences:
    prefs = prefs if isinstance(prefs, dict) else {}
    return Preferences(
        occasion=_pick(prefs.get("occasion"), ALLOWED_OCCASIONS, "casual"),
        priceRange=_pick(prefs.get("priceRange"), ALLOWED_PRICE_RANGES, "misturar"),
        region=_pick(prefs.get("region"), ALLOWED_REGIONS, "brasil"),
        fragranceIntensity=_pick(prefs.get("fragranceIntensity"), ALLOWED_INTENSITIES, "medio"),
    )


def is_direct_image_url(url: str) -> bool:
    url = url.strip()
    if any(rx.search(url) for rx in TRUSTED_IMAGE_HOSTS):
        return True
    return _IMAGE_EXT_RE.search(url) is not None


def looks_like_pin_page(url: str) -> bool:
    return _PIN_PAGE_RE.search(url.strip()) is not None


def detect_url_mode(images: List[str], is_urls: bool) -> bool:
    return is_urls or (bool(images) and images[0].strip().startswith("http"))


def check_url_images(images: List[str], lang: str = "pt") -> List[str]:
    cleaned = [u.strip() for u in images if u and u.strip()]
    if len(cleaned) != IMAGE_COUNT:
        raise _reject("need_exactly_3", lang)
    if any(looks_like_pin_page(u) for u in cleaned):
        raise _reject("pinterest_pin_page", lang)
    if not all(is_direct_image_url(u) for u in cleaned):
        raise _reject("not_direct_image", lang)
    return cleaned


def check_inline_images(images: List[str], lang: str = "pt", max_bytes: Optional[int] = None) -> List[str]:
    limit = max_bytes if max_bytes is not None else settings.MAX_IMAGE_BYTES
    if len(images) != IMAGE_COUNT:
        raise _reject("need_exactly_3", lang)
    for data in images:
        if not data.startswith("data:image/"):
            raise _reject("invalid_image", lang)
        # base64 inflates by 4/3
        if len(data) * 3 / 4 > limit:
            raise _reject("image_too_large", lang)
    return images


def check_brand_refs(brand_refs: List[str], lang: str = "pt") -> List[str]:
    names = [b.strip() for b in brand_refs if b and b.strip()]
    if names and not (2 <= len(names) <= 3):
        raise _reject("brand_count", lang)
    return names


def build_request(variant: str, body: GenerateIn) -> GenerationRequest:
    """Validate a raw generation body and turn it into a GenerationRequest.

    Every rejection is an ``invalid_input`` GenerationError with copy in the
    variant's language.
    """
    try:
        spec = get_variant(variant)
    except KeyError:
        raise GenerationError(ErrorKind.INVALID_INPUT, f"Unknown generation variant: {variant}")
    lang = spec.lang

    images = list(body.images or [])
    is_urls = detect_url_mode(images, body.isUrls)
    brands = check_brand_refs(body.brandRefs or [], lang) if variant == "studio" else []

    if images:
        images = check_url_images(images, lang) if is_urls else check_inline_images(images, lang)
    elif variant == "studio":
        if not brands:
            raise _reject("no_references", lang)
    else:
        raise _reject("need_exactly_3", lang)

    brand_info = None
    if body.brandInfo:
        brand_info = BrandInfo(
            name=str(body.brandInfo.get("name") or ""),
            category=str(body.brandInfo.get("category") or ""),
            objective=str(body.brandInfo.get("objective") or ""),
        )

    return GenerationRequest(
        variant=variant,
        visual=images,
        is_urls=is_urls,
        brand_names=brands,
        category=body.category or "fashion",
        tone=body.tone,
        note=(body.note or "").strip(),
        preferences=sanitize_preferences(body.preferences),
        brand_info=brand_info,
    )
