from __future__ import annotations

import json
from typing import Any, Dict

from editorial.services.generation.prompts import BuiltPrompt
from editorial.services.generation.variants import VARIANTS

_STUB_PAYLOADS: Dict[str, Dict[str, Any]] = {
    "capsule": {
        "covered": ["Base neutra"],
        "missing": [{"item": "Blazer de lã fria", "priority": 1, "why": "estrutura os looks"}],
        "top_three": [
            {"priority": "P1", "item": "Blazer de lã fria", "impact": "estrutura"},
            {"priority": "P2", "item": "Calça de alfaiataria", "impact": "versatilidade"},
            {"priority": "P3", "item": "Mocassim de couro", "impact": "acabamento"},
        ],
        "edit_rule": "Menos peças, mais intenção.",
    },
}


class LocalProvider:
    """Offline provider for development: answers with a fixed, fenced payload."""

    name = "local"

    def __init__(self, payloads: Dict[str, Dict[str, Any]] | None = None):
        self.payloads = payloads or _STUB_PAYLOADS

    def _payload(self, variant: str) -> Dict[str, Any]:
        if variant in self.payloads:
            return self.payloads[variant]
        spec = VARIANTS.get(variant)
        keys = spec.required_keys if spec else ()
        return {k: {} for k in keys}

    async def complete(self, prompt: BuiltPrompt, *, model: str, max_tokens: int, temperature: float, timeout_ms: int) -> Any:
        payload = self._payload(prompt.variant)
        return f"```json\n{json.dumps(payload, ensure_ascii=False)}\n```"
