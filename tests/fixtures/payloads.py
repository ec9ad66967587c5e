import json

EDITORIAL_PAYLOAD = {
    "profile": {"aesthetic_primary": "minimal_chic", "confidence": 0.8},
    "editorial": {
        "headline": "Silêncio elegante",
        "outfits": [
            {
                "title": "Look 01",
                "hero": "Blazer Zara de lã",
                "supporting": ["Calça reta", "Tênis Nike branco"],
                "accessory": "Bolsa Gucci",
            }
        ],
    },
}

CAPSULE_PAYLOAD = {
    "covered": ["Jeans escuro", "Camisa Zara branca"],
    "missing": [{"item": "Blazer Prada de alfaiataria", "priority": 1, "why": "estrutura"}],
    "top_three": [
        {"priority": "P1", "item": "Blazer de alfaiataria", "impact": "estrutura"},
        {"priority": "P2", "item": "Mocassim Gucci de couro", "impact": "acabamento"},
        {"priority": "P3", "item": "Cinto de couro", "impact": "definição"},
    ],
    "edit_rule": "Menos peças, mais intenção.",
}

STUDIO_PAYLOAD = {
    "persona": {"archetype": "The Curator"},
    "positioning": "Quiet precision.",
    "brand_codes": {"visual": {}, "verbal": {}},
    "why_it_works": ["a", "b", "c"],
    "commerce": {
        "shortlist": [{"category": "Hero", "item_name": "Jacquemus-style cropped jacket"}],
        "look_recipes": [{"formula": "Wide trousers + Jacquemus knit"}],
    },
}


def wrapped(payload: dict) -> str:
    return "Here you go:\n```json\n" + json.dumps(payload, ensure_ascii=False) + "\n```\nEnjoy!"


INLINE_IMAGE = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"
URL_IMAGES = [
    "https://images.unsplash.com/photo-1",
    "https://i.pinimg.com/736x/aa/bb/cc.jpg",
    "https://example.com/look.webp?w=800",
]
