from dataclasses import dataclass, field
from typing import Dict, Tuple

from editorial.core.config import settings


@dataclass(frozen=True)
class VariantSpec:
    name: str
    required_keys: Tuple[str, ...]
    model_setting: str
    max_tokens: int
    temperature: float
    debug_prefix: str
    lang: str = "pt"
    sanitize_paths: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def model(self) -> str:
        return getattr(settings, self.model_setting)


EDITORIAL = VariantSpec(
    name="editorial",
    required_keys=("profile", "editorial"),
    model_setting="LLM_MODEL_EDITORIAL",
    max_tokens=4000,
    temperature=0.3,
    debug_prefix="dbg",
    sanitize_paths=(
        "editorial.outfits[].hero",
        "editorial.outfits[].supporting",
        "editorial.outfits[].accessory",
    ),
)

GLOBAL_EDITORIAL = VariantSpec(
    name="global-editorial",
    required_keys=("profile", "editorial"),
    model_setting="LLM_MODEL_DEFAULT",
    max_tokens=3000,
    temperature=0.7,
    debug_prefix="glb",
    lang="en",
    # fragrances are real, named products on purpose and are left alone
    sanitize_paths=(
        "editorial.looks[].hero_piece",
        "editorial.looks[].supporting",
        "editorial.looks[].accessory",
        "editorial.commerce.shortlist[].item_name",
        "editorial.commerce.look_recipes[].formula",
    ),
)

STUDIO = VariantSpec(
    name="studio",
    required_keys=("persona", "positioning", "brand_codes", "why_it_works"),
    model_setting="LLM_MODEL_DEFAULT",
    max_tokens=3000,
    temperature=0.7,
    debug_prefix="studio",
    lang="en",
    sanitize_paths=(
        "looks[].hero_piece",
        "looks[].supporting",
        "looks[].accessory",
        "fragrances[].name",
        "commerce.shortlist[].item_name",
        "commerce.look_recipes[].formula",
    ),
)

PRO_EDITORIAL = VariantSpec(
    name="pro-editorial",
    required_keys=("persona", "positioning", "brand_codes", "creative_directions"),
    model_setting="LLM_MODEL_DEFAULT",
    max_tokens=4000,
    temperature=0.7,
    debug_prefix="pro",
)

CAPSULE = VariantSpec(
    name="capsule",
    required_keys=("covered", "missing", "top_three", "edit_rule"),
    model_setting="LLM_MODEL_DEFAULT",
    max_tokens=2000,
    temperature=0.7,
    debug_prefix="cap",
    sanitize_paths=("covered", "missing[].item", "top_three[].item"),
)

VARIANTS: Dict[str, VariantSpec] = {
    v.name: v for v in (EDITORIAL, GLOBAL_EDITORIAL, STUDIO, PRO_EDITORIAL, CAPSULE)
}


def get_variant(name: str) -> VariantSpec:
    if name not in VARIANTS:
        raise KeyError(name)
    return VARIANTS[name]
