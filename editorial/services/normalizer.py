from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from editorial.core.errors import ErrorKind, GenerationError
from editorial.core.mappings import BRAND_TABLE, COLOR_TABLE, SLANG_TABLE, MappingTable

MIN_ITEM_CHARS = 2
MAX_BRAND_PASSES = 8

EMPTY_INPUT_NOTE = "Input vazio"
BRAND_ONLY_NOTE = "Item ignorado: apenas marca, sem tipo de peça"
INSUFFICIENT_ITEMS_MESSAGE = (
    "Você pode citar 3 a 6 peças, mesmo básicas, para eu fechar a cápsula com precisão."
)

_SPLIT_RE = re.compile(r"[,;|\n]+")
_EMOJI_RE = re.compile(
    "["
    "\U0001F600-\U0001F64F"
    "\U0001F300-\U0001F5FF"
    "\U0001F680-\U0001F6FF"
    "\U0001F700-\U0001F77F"
    "\U0001F780-\U0001F7FF"
    "\U0001F800-\U0001F8FF"
    "\U0001F900-\U0001F9FF"
    "\U0001FA00-\U0001FA6F"
    "\U0001FA70-\U0001FAFF"
    "\U0001F000-\U0001F02F"
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "\uFE00-\uFE0F"
    "\u200D"
    "]+"
)
_COMMA_RE = re.compile(r"(?:\s*,\s*)+")
_EDGE_PUNCT_RE = re.compile("^[\\s,;:.\\-\u2013\u2014/|&+]+|[\\s,;:.\\-\u2013\u2014/|&+]+$")


class NormalizedItems(BaseModel):
    normalized: List[str] = Field(default_factory=list)
    notes: Optional[List[str]] = None


def strip_emoji(text: str) -> str:
    return _EMOJI_RE.sub("", text or "").strip()


def split_items(text: str) -> List[str]:
    parts = (strip_emoji(p.strip()) for p in _SPLIT_RE.split(text or ""))
    return [p for p in parts if p]


def cleanup_text(text: str) -> str:
    out = " ".join((text or "").split())
    out = _COMMA_RE.sub(", ", out)
    return _EDGE_PUNCT_RE.sub("", out)


def capitalize_first(text: str) -> str:
    if not text:
        return text
    return text[:1].upper() + text[1:]


def strip_brands(text: str, brands: MappingTable) -> str:
    """Replace or remove every brand mention in ``text``.

    A brand with a generic description becomes that description, with the
    rest of the original text kept after a comma ("Vans branco" ->
    "tênis branco casual, sola reta, branco"). A brand without one is cut out.
    """
    out = text
    for _ in range(MAX_BRAND_PASSES):
        match = brands.find(out)
        if match is None:
            return out
        remaining = cleanup_text(brands.remove(out, match.key))
        if match.replacement:
            out = f"{match.replacement}, {remaining}" if len(remaining) >= MIN_ITEM_CHARS else match.replacement
        else:
            out = remaining
    # Removal only from here on: every pass shortens the text.
    match = brands.find(out)
    while match is not None:
        out = cleanup_text(brands.remove(out, match.key))
        match = brands.find(out)
    return out


class ItemNormalizer:
    def __init__(
        self,
        brands: MappingTable = BRAND_TABLE,
        slang: MappingTable = SLANG_TABLE,
        colors: MappingTable = COLOR_TABLE,
    ):
        self.brands = brands
        self.slang = slang
        self.colors = colors

    def normalize_item(self, item: str, notes: Optional[List[str]] = None) -> Optional[str]:
        if len(item) < MIN_ITEM_CHARS:
            return None
        text = item
        if self.brands.find(text) is not None:
            text = strip_brands(text, self.brands)
            if len(cleanup_text(text)) < MIN_ITEM_CHARS:
                if notes is not None:
                    notes.append(BRAND_ONLY_NOTE)
                return None
        text = self.slang.substitute(text)
        text = self.colors.substitute(text)
        text = strip_brands(text, self.brands)
        text = capitalize_first(cleanup_text(text))
        if len(text) < MIN_ITEM_CHARS:
            return None
        return text

    def normalize(self, text: str) -> NormalizedItems:
        if not text or not text.strip():
            return NormalizedItems(normalized=[], notes=[EMPTY_INPUT_NOTE])

        notes: List[str] = []
        seen: set[str] = set()
        normalized: List[str] = []
        for candidate in split_items(text):
            item = self.normalize_item(candidate, notes)
            if item is None:
                continue
            key = item.casefold()
            if key not in seen:
                seen.add(key)
                normalized.append(item)

        return NormalizedItems(normalized=normalized, notes=notes or None)


def has_minimum(items: NormalizedItems, threshold: int = 2) -> bool:
    return len(items.normalized) >= threshold


def check_minimum_content(raw_text: str, items: NormalizedItems, threshold: int, min_chars: int) -> None:
    """Both the raw text floor and the normalized item count must pass."""
    if len((raw_text or "").strip()) < min_chars or not has_minimum(items, threshold):
        raise GenerationError(ErrorKind.INSUFFICIENT_ITEMS, INSUFFICIENT_ITEMS_MESSAGE)


class OutputSanitizer:
    """Removes brand names from model-generated item names before they reach the user."""

    def __init__(self, brands: MappingTable = BRAND_TABLE):
        self.brands = brands

    def with_extra_brands(self, names: Iterable[str]) -> "OutputSanitizer":
        extra = {n.strip(): "" for n in names if n and len(n.strip()) > MIN_ITEM_CHARS}
        if not extra:
            return self
        return OutputSanitizer(self.brands.merged(f"{self.brands.name}+request", extra))

    def sanitize_text(self, text: str) -> str:
        return capitalize_first(cleanup_text(strip_brands(text, self.brands)))

    def sanitize(self, items: Sequence[str]) -> List[str]:
        out = (self.sanitize_text(i) for i in items)
        return [i for i in out if len(i) >= MIN_ITEM_CHARS]

    def sanitize_paths(self, payload: Any, paths: Iterable[str]) -> Any:
        """Sanitize strings found at dotted paths; ``name[]`` walks every list element."""
        for path in paths:
            self._apply(payload, path.split("."))
        return payload

    def _apply(self, node: Any, parts: List[str]) -> None:
        head, rest = parts[0], parts[1:]
        many = head.endswith("[]")
        key = head[:-2] if many else head
        if not isinstance(node, dict) or node.get(key) is None:
            return
        value = node[key]
        if many and rest:
            if isinstance(value, list):
                for el in value:
                    self._apply(el, rest)
        elif rest:
            self._apply(value, rest)
        elif isinstance(value, str):
            node[key] = self.sanitize_text(value)
        elif isinstance(value, list):
            node[key] = self._sanitize_mixed(value)

    def _sanitize_mixed(self, values: List[Any]) -> List[Any]:
        out: List[Any] = []
        for v in values:
            if isinstance(v, str):
                v = self.sanitize_text(v)
                if len(v) < MIN_ITEM_CHARS:
                    continue
            out.append(v)
        return out


default_normalizer = ItemNormalizer()
default_sanitizer = OutputSanitizer()


def normalize(text: str) -> NormalizedItems:
    return default_normalizer.normalize(text)


def sanitize(items: Sequence[str]) -> List[str]:
    return default_sanitizer.sanitize(items)
