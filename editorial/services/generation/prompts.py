from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from editorial.core.errors import ErrorKind, GenerationError
from editorial.services.generation.types import GenerationRequest

VISUAL_REFERENCE_COUNT = 3
MIN_BRAND_REFS = 2
MAX_BRAND_REFS = 3

OUTPUT_RULES_PT = (
    "REGRAS DE SAÍDA:\n"
    "- Retorne APENAS o objeto JSON pedido. Sem markdown, sem blocos de código, sem texto antes ou depois.\n"
    "- Todos os campos são OBRIGATÓRIOS.\n"
    "- Se alguma referência for uma selfie ou foto pessoal, retorne somente "
    '{"error": "selfie_not_allowed"}.\n'
    "- Se alguma referência tiver nudez, menores ou conteúdo impróprio, retorne somente "
    '{"error": "content_not_allowed"}.'
)

OUTPUT_RULES_EN = (
    "OUTPUT RULES:\n"
    "- Return ONLY the requested JSON object. No markdown, no code blocks, no text before or after it.\n"
    "- All fields are REQUIRED.\n"
    "- If any reference is a selfie or a personal photo, return only "
    '{"error": "selfie_not_allowed"}.\n'
    "- If any reference contains nudity, minors or otherwise unsafe content, return only "
    '{"error": "content_not_allowed"}.'
)

BRANDS_AS_INSPIRATION_EN = (
    "The brand names are creative inspiration ONLY. Never name, echo, copy or imitate them "
    "anywhere in the output; develop an ORIGINAL direction."
)

AESTHETIC_IDS = (
    "clean_glow",
    "minimal_chic",
    "romantic_modern",
    "after_dark_minimal",
    "soft_grunge",
    "street_sporty",
    "color_pop",
    "boho_updated",
    "classic_luxe",
    "coastal_cool",
    "soft_glam",
    "artsy_eclectic",
)

AESTHETIC_LABELS: Dict[str, str] = {
    "clean_glow": "Glow limpo: pele luminosa, minimalismo fresco, presença leve",
    "minimal_chic": "Minimal chic: cortes precisos, neutros sofisticados, menos é mais",
    "romantic_modern": "Romântico moderno: suavidade com estrutura, feminilidade atual",
    "after_dark_minimal": "Minimal noturno: alto contraste, linhas limpas, noite polida",
    "soft_grunge": "Grunge suave: texturas vividas, preto lavado, charme sem esforço",
    "street_sporty": "Street sporty: energia urbana, peças utilitárias, conforto intencional",
    "color_pop": "Cor em destaque: paleta ousada, impacto controlado",
    "boho_updated": "Boho polido: fluidez, naturalidade, boho com acabamento",
    "classic_luxe": "Clássico luxo: ícones atemporais, materiais nobres",
    "coastal_cool": "Coastal cool: claro, textura orgânica, refinamento relaxado",
    "soft_glam": "Glam suave: polido, brilho sutil, beleza pronta para câmera",
    "artsy_eclectic": "Artsy eclético: combinações inesperadas, repertório criativo",
}

CATEGORY_LABELS = {"fashion": "Fashion", "beauty": "Beauty", "food": "Food & Drink", "tech": "Tech"}

EDITORIAL_SHAPE = {
    "profile": {
        "aesthetic_primary": "|".join(AESTHETIC_IDS),
        "aesthetic_secondary": "|".join(AESTHETIC_IDS),
        "confidence": 0.85,
        "palette_hex": ["#RRGGBB", "#RRGGBB", "#RRGGBB"],
        "contrast": "low|medium|high",
        "textures": ["textura"],
        "silhouettes": ["silhueta"],
        "makeup_finish": ["dewy|satin|matte|blur|soft_glam"],
        "fragrance_family": ["fresh|floral|amber|woody|gourmand|aromatic|aquatic"],
        "vibe_keywords": ["palavra-chave"],
        "why_this": ["motivo 1", "motivo 2", "motivo 3"],
    },
    "editorial": {
        "headline": "manchete editorial",
        "dek": "linha fina",
        "outfits": [
            {
                "title": "Look 01",
                "hero": "peça principal, sem marca",
                "supporting": ["peça", "peça", "peça"],
                "accessory": "acessório",
                "caption": "legenda editorial",
            }
        ],
        "makeup": {
            "day": {"base": "", "cheeks": "", "eyes": "", "lips": ""},
            "night": {"base": "", "cheeks": "", "eyes": "", "lips": ""},
        },
        "fragrance": {"direction": "", "affordable": "", "mid": "", "premium": ""},
        "footer_note": "nota de fechamento",
    },
}

GLOBAL_EDITORIAL_SHAPE = {
    "profile": {
        "aesthetic_primary": "main style name",
        "aesthetic_secondary": "secondary style",
        "confidence": 0.85,
        "palette_hex": ["#hex1", "#hex2", "#hex3", "#hex4", "#hex5"],
        "contrast": "low|medium|high",
        "textures": ["3-4 textures"],
        "silhouettes": ["3-4 silhouettes"],
        "makeup_finish": "ideal makeup finish",
        "fragrance_family": "dominant olfactory family",
        "why_this": ["reason 1", "reason 2", "reason 3"],
    },
    "editorial": {
        "headline": "editorial headline",
        "dek": "one or two lines",
        "looks": [
            {
                "title": "Day Look",
                "hero_piece": "generic main piece",
                "supporting": ["item 1", "item 2"],
                "accessory": "key accessory",
                "caption": "short caption",
            }
        ],
        "makeup_day": {"base": "", "cheeks": "", "eyes": "", "lips": ""},
        "makeup_night": {"base": "", "cheeks": "", "eyes": "", "lips": ""},
        "fragrances": [
            {"name": "", "brand": "", "notes": "", "price_tier": "affordable|mid|premium", "why_it_matches": ""}
        ],
        "footer_note": "closing note",
        "commerce": {
            "shortlist": [
                {"category": "Hero", "item_name": "generic piece", "price_lane": "Affordable|Mid-range|Premium", "rationale": ""}
            ],
            "look_recipes": [{"formula": "one-line outfit formula (no brands)"}],
            "search_terms": ["term"],
        },
    },
}

STUDIO_SHAPE = {
    "persona": {
        "archetype": "e.g. The Curator",
        "mental_city": "e.g. Copenhagen",
        "ambition": "",
        "would_say": "",
        "would_never_say": "",
    },
    "positioning": "one elegant sentence",
    "brand_codes": {
        "visual": {"palette": ["#hex1", "#hex2", "#hex3", "#hex4", "#hex5"], "contrast": "low|medium|high",
                   "textures": [""], "composition": [""], "light": ""},
        "verbal": {"tone": "", "rhythm": "", "allowed_words": [""], "forbidden_words": [""]},
    },
    "why_it_works": ["reason 1", "reason 2", "reason 3"],
    "looks": [{"title": "", "hero_piece": "", "supporting": ["", ""], "accessory": "", "caption": ""}],
    "makeup": {"base": "", "cheeks": "", "eyes": "", "lips": ""},
    "fragrances": [{"name": "generic name, no brand", "notes": "", "price_tier": "affordable|mid|premium", "why_it_matches": ""}],
    "commerce": {
        "shortlist": [{"category": "Hero", "item_name": "generic piece", "price_lane": "Affordable|Mid-range|Premium", "rationale": ""}],
        "look_recipes": [{"formula": "one-line styling formula (no brands)"}],
        "search_terms": ["term"],
    },
    "closing_note": "short, poetic closing paragraph",
}

PRO_SHAPE = {
    "persona": {
        "archetype": "ex: A Curadora",
        "cultural_age": "ex: 28-35",
        "mental_city": "ex: São Paulo",
        "ambition": "",
        "avoidances": ["", "", ""],
        "would_say": "",
        "would_never_say": "",
    },
    "positioning": "frase única de posicionamento",
    "brand_codes": {
        "visual": {"palette": ["#hex1", "#hex2", "#hex3", "#hex4", "#hex5"], "contrast": "low|medium|high",
                   "textures": [""], "composition_rules": [""]},
        "verbal": {"tone": "", "rhythm": "", "allowed_words": [""], "forbidden_words": [""]},
    },
    "creative_directions": [
        {"type": "signature|aspirational|conversion", "title": "", "lighting": "", "framing": "", "styling": "", "post_ideas": [""]}
    ],
    "content_system": {"pillars": [""], "cadence": "", "shotlist": [""]},
    "copy_kit": {"tagline": "", "claims": [""], "hooks": [""], "captions": [""], "ctas": [""]},
    "dos_donts": {"dos": [""], "donts": [""]},
}

CAPSULE_SHAPE = {
    "covered": ["categoria ou peça que já está bem coberta (máx 5)"],
    "missing": [{"item": "descrição genérica da peça que falta", "priority": 1, "why": "razão curta"}],
    "top_three": [
        {"priority": "P1", "item": "peça mais urgente", "impact": "impacto em 1 linha"},
        {"priority": "P2", "item": "", "impact": ""},
        {"priority": "P3", "item": "", "impact": ""},
    ],
    "edit_rule": "regra de edição (máx 15 palavras)",
}


@dataclass
class BuiltPrompt:
    system: str
    user_content: List[Dict[str, Any]] = field(default_factory=list)
    variant: str = ""

    def messages(self) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user_content},
        ]


def _shape(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2)


def _text(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def _image_parts(req: GenerationRequest) -> List[Dict[str, Any]]:
    # references pass through untouched; URLs only lose surrounding whitespace
    return [
        {"type": "image_url", "image_url": {"url": ref.strip() if req.is_urls else ref}}
        for ref in req.visual
    ]


def _invalid(message: str) -> GenerationError:
    return GenerationError(ErrorKind.INVALID_INPUT, message)


def check_references(req: GenerationRequest) -> None:
    if req.visual and len(req.visual) != VISUAL_REFERENCE_COUNT:
        raise _invalid(f"Use exactly {VISUAL_REFERENCE_COUNT} visual references.")
    if req.brand_names and not (MIN_BRAND_REFS <= len(req.brand_names) <= MAX_BRAND_REFS):
        raise _invalid(f"Provide {MIN_BRAND_REFS}-{MAX_BRAND_REFS} brand references.")
    if req.mode is None:
        raise _invalid("Provide visual references or at least 2 brands.")


def build_editorial(req: GenerationRequest) -> BuiltPrompt:
    if not req.visual:
        raise _invalid("Envie exatamente 3 imagens.")
    prefs = req.preferences
    system = (
        "Você é consultora de editorial de moda de luxo para o público brasileiro. Você interpreta "
        "imagens de moodboard e escreve guias editoriais no tom de Vogue e Harper's Bazaar.\n\n"
        "- Nunca recuse uma imagem abstrata: leia paleta, contraste, textura e mood. Com imagens muito "
        "abstratas use confidence entre 0.45 e 0.65, sem omitir campos.\n"
        "- Não analise rostos nem traços pessoais, apenas a estética das referências.\n"
        "- Descreva peças sem citar marcas.\n"
        "- Todo o texto em português brasileiro (pt-BR).\n\n"
        f"{OUTPUT_RULES_PT}\n\nFormato exato:\n{_shape(EDITORIAL_SHAPE)}"
    )
    context = (
        "Preferências do usuário:\n"
        f"- Ocasião: {prefs.occasion}\n"
        f"- Faixa de preço: {prefs.priceRange}\n"
        f"- Região: {prefs.region}\n"
        f"- Intensidade de fragrância: {prefs.fragranceIntensity}\n"
    )
    if req.tone:
        context += f"- Tom: {req.tone}\n"
    text = (
        "Analise estas 3 imagens de referência e gere um editorial completo no estilo Vogue/Harper's.\n"
        f"{context}\nLEMBRETE FINAL: retorne APENAS JSON válido, sem markdown e sem texto extra."
    )
    return BuiltPrompt(system=system, user_content=[_text(text), *_image_parts(req)])


def build_global_editorial(req: GenerationRequest) -> BuiltPrompt:
    if not req.visual:
        raise _invalid("Upload exactly 3 images.")
    system = (
        "You are a high-end personal style consultant for a global audience. You read visual "
        "references and write aesthetic readings in the tone of Vogue and Harper's Bazaar.\n\n"
        "- Never refuse an abstract reference: interpret palette, contrast, texture and mood.\n"
        "- English only. Short sentences, confident tone, no slang.\n"
        "- Looks, shortlist items and look recipes are GENERIC pieces with no brand names.\n"
        "- Fragrances: exactly 3 real, globally available perfumes (affordable, mid, premium).\n\n"
        f"{OUTPUT_RULES_EN}\n\nExact shape:\n{_shape(GLOBAL_EDITORIAL_SHAPE)}"
    )
    text = (
        "Analyze these 3 reference images and generate the complete aesthetic profile and editorial. "
        "Return ONLY the JSON."
    )
    return BuiltPrompt(system=system, user_content=[_text(text), *_image_parts(req)])


def build_studio(req: GenerationRequest) -> BuiltPrompt:
    check_references(req)
    brands = ", ".join(req.brand_names)
    category = f"Category: {CATEGORY_LABELS.get(req.category, req.category)}"
    note = f'\nAdditional context from client: "{req.note}"' if req.note else ""
    tone = f"\nRequested tone: {req.tone}" if req.tone else ""

    if req.mode == "both":
        context = (
            "You will receive TWO kinds of reference:\n"
            "1. Visual moodboard images (palette, textures, composition)\n"
            f"2. Inspirational brands: {brands} (positioning, tone, visual language)\n\n"
            "MERGE both editorially, finding the connection between the visual aesthetic and the "
            f"universe of the cited brands.\n{BRANDS_AS_INSPIRATION_EN}"
        )
        text = (
            f"Analyze these visual references along with the inspirational brands ({brands}) and generate "
            "the complete brand direction document. Merge both sources editorially. Return ONLY the JSON."
        )
    elif req.mode == "visual-only":
        context = "You will receive visual moodboard images that inform palette, textures, composition and direction."
        text = "Analyze these reference images and generate the complete brand direction document. Return ONLY the JSON."
    else:
        context = (
            f"You will receive inspirational brand references: {brands}\n\n"
            "Read the universe of these brands for positioning, tone of voice, visual language, "
            f"implicit aesthetic codes, audience and aspiration.\n{BRANDS_AS_INSPIRATION_EN}"
        )
        text = (
            f"Analyze the universe of {brands} and generate an original brand direction document "
            "inspired by them. Return ONLY the JSON."
        )

    system = (
        "You are a high-end creative director. You write brand direction documents in the editorial "
        "tone of Vogue and Harper's Bazaar.\n\n"
        f"{category}{note}{tone}\n\n{context}\n\n"
        "TONE: polished, restrained, editorial. Never operational: no posting calendars, engagement or "
        "content systems. English only. Never repeat information between sections.\n\n"
        f"{OUTPUT_RULES_EN}\n\nExact shape:\n{_shape(STUDIO_SHAPE)}"
    )
    parts = [_text(text)]
    if req.visual:
        parts.extend(_image_parts(req))
    return BuiltPrompt(system=system, user_content=parts)


def build_pro_editorial(req: GenerationRequest) -> BuiltPrompt:
    if not req.visual:
        raise _invalid("Envie exatamente 3 imagens.")
    info = req.brand_info
    brand_context = ""
    if info and info.name:
        brand_context = (
            f"\nMarca pessoal: {info.name}"
            + (f"\nCategoria: {info.category}" if info.category else "")
            + (f"\nObjetivo: {info.objective}" if info.objective else "")
        )
    system = (
        "Você é consultora de direção criativa e branding de alto nível para marcas pessoais "
        "brasileiras. Você lê imagens de moodboard e gera um Brand Editorial Kit completo no tom de "
        "Vogue e Harper's Bazaar.\n\n"
        "- Nunca recuse uma imagem abstrata: interprete paleta, contraste, textura e mood.\n"
        "- creative_directions: signature (identidade core), aspirational (elevação), conversion (vendas).\n"
        "- Todo o texto em português brasileiro (pt-BR). Premium, confiante, nunca arrogante.\n\n"
        f"{OUTPUT_RULES_PT}\n\nFormato exato:\n{_shape(PRO_SHAPE)}"
    )
    text = (
        f"Analise estas 3 imagens de referência e gere o Brand Editorial Kit completo.{brand_context}\n"
        "Retorne APENAS o JSON, sem explicações."
    )
    return BuiltPrompt(system=system, user_content=[_text(text), *_image_parts(req)])


def build_capsule(req: GenerationRequest) -> BuiltPrompt:
    if not req.aesthetic_id:
        raise _invalid("Selecione uma direção estética.")
    if not req.items:
        raise _invalid("Escreva algumas peças, mesmo poucas já resolvem a base.")
    label = AESTHETIC_LABELS.get(req.aesthetic_id, req.aesthetic_id)
    system = (
        "Você é consultora de guarda-roupa cápsula de alto nível para o mercado brasileiro, no tom de "
        "Vogue e Harper's Bazaar.\n\n"
        f'A direção estética escolhida é: "{label}".\n'
        "Você receberá a lista de peças que a pessoa já tem. Identifique o que já está coberto, o que "
        "falta por prioridade, os 3 itens mais urgentes e uma regra de edição simples.\n\n"
        "- NÃO cite marcas, lojas ou produtos específicos; descreva textura, material, acabamento, cor e forma.\n"
        "- Sem links, preços ou referências de compra.\n"
        "- covered: no máximo 5 itens. missing: no máximo 10, ordenados por prioridade. "
        "top_three: exatamente 3 (P1, P2, P3).\n"
        "- Todo o texto em português brasileiro (pt-BR).\n\n"
        f"{OUTPUT_RULES_PT}\n\nFormato exato:\n{_shape(CAPSULE_SHAPE)}"
    )
    pieces = "\n".join(f"- {item}" for item in req.items)
    budget = f"\n\nOrçamento preferido: {req.budget}" if req.budget else ""
    text = f"Peças que a pessoa já tem:\n\n{pieces}{budget}\n\nAnalise e monte a cápsula."
    return BuiltPrompt(system=system, user_content=[_text(text)])


BUILDERS: Dict[str, Callable[[GenerationRequest], BuiltPrompt]] = {
    "editorial": build_editorial,
    "global-editorial": build_global_editorial,
    "studio": build_studio,
    "pro-editorial": build_pro_editorial,
    "capsule": build_capsule,
}


def build(req: GenerationRequest) -> BuiltPrompt:
    builder = BUILDERS.get(req.variant)
    if builder is None:
        raise _invalid(f"Unknown generation variant: {req.variant}")
    if req.variant != "capsule" and req.visual and len(req.visual) != VISUAL_REFERENCE_COUNT:
        raise _invalid(f"Use exactly {VISUAL_REFERENCE_COUNT} visual references.")
    prompt = builder(req)
    prompt.variant = req.variant
    return prompt
