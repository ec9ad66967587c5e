import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Pattern, Tuple


@dataclass(frozen=True)
class TableMatch:
    key: str
    replacement: str
    start: int
    end: int


class MappingTable:
    """Read-only pattern -> replacement lookup for one concern (brands, slang, colors).

    Keys are matched case-insensitively as plain substrings. Lookups always try
    longer keys before shorter ones, so "adidas samba" wins over "adidas".
    """

    __slots__ = ("name", "_entries", "_patterns")

    def __init__(self, name: str, entries: Mapping[str, str]):
        self.name = name
        lowered: Dict[str, str] = {}
        for key, value in entries.items():
            k = " ".join(key.split()).lower()
            if k:
                lowered[k] = value
        ordered = sorted(lowered.items(), key=lambda kv: (-len(kv[0]), kv[0]))
        self._entries: Mapping[str, str] = MappingProxyType(dict(ordered))
        self._patterns: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
            (k, re.compile(re.escape(k), re.IGNORECASE)) for k, _ in ordered
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._entries

    def __repr__(self) -> str:
        return f"MappingTable({self.name!r}, {len(self)} entries)"

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._entries.get(key.lower(), default)

    def find(self, text: str) -> Optional[TableMatch]:
        if not text:
            return None
        for key, pattern in self._patterns:
            m = pattern.search(text)
            if m:
                return TableMatch(key=key, replacement=self._entries[key], start=m.start(), end=m.end())
        return None

    def remove(self, text: str, key: str) -> str:
        """Drop every occurrence of ``key`` from ``text``."""
        return re.sub(re.escape(key), "", text, flags=re.IGNORECASE)

    def substitute(self, text: str) -> str:
        """Apply the single longest matching entry to ``text``.

        Every occurrence of the winning key is replaced. When the replacement
        already contains the key and is already present in the text, the text
        is treated as canonical and returned untouched, which keeps a second
        pass from expanding "legging de lycra" into "legging de lycra de lycra".
        """
        match = self.find(text)
        if match is None:
            return text
        repl = match.replacement
        if match.key in repl.lower() and repl.lower() in text.lower():
            return text
        return re.sub(re.escape(match.key), lambda _m: repl, text, flags=re.IGNORECASE)

    def merged(self, name: str, extra: Mapping[str, str]) -> "MappingTable":
        combined = dict(self._entries)
        combined.update({k: v for k, v in extra.items() if k and k.strip()})
        return MappingTable(name, combined)


# Generic, brand-free descriptions for known brands. An empty value means the
# brand is removed and only the garment type that follows it is kept.
BRAND_MAPPINGS: Dict[str, str] = {
    # sneakers
    "vans": "tênis branco casual, sola reta",
    "air force": "tênis branco robusto, casual",
    "airforce": "tênis branco robusto, casual",
    "af1": "tênis branco robusto, casual",
    "converse": "tênis de lona, cano baixo",
    "all star": "tênis de lona, cano baixo",
    "allstar": "tênis de lona, cano baixo",
    "adidas samba": "tênis retrô de perfil baixo",
    "samba": "tênis retrô de perfil baixo",
    "nike": "tênis esportivo casual",
    "adidas": "tênis esportivo casual",
    "new balance": "tênis esportivo casual",
    "nb": "tênis esportivo casual",
    "puma": "tênis esportivo casual",
    "reebok": "tênis esportivo casual",
    "asics": "tênis esportivo casual",
    "jordan": "tênis esportivo alto",
    # fast fashion
    "zara": "",
    "shein": "",
    "h&m": "",
    "hm": "",
    "forever 21": "",
    "forever21": "",
    "renner": "",
    "c&a": "",
    "cea": "",
    "riachuelo": "",
    "marisa": "",
    "lojas marisa": "",
    # beauty
    "sephora": "",
    "mac": "",
    "m.a.c": "",
    "dior": "",
    "chanel": "",
    "ysl": "",
    "nars": "",
    "urban decay": "",
    "fenty": "",
    "rare beauty": "",
    "charlotte tilbury": "",
    "bobbi brown": "",
    "clinique": "",
    "lancome": "",
    "lancôme": "",
    "o boticário": "",
    "boticário": "",
    "natura": "",
    "eudora": "",
    "avon": "",
    "mary kay": "",
    "maybelline": "",
    "revlon": "",
    "loreal": "",
    "l'oreal": "",
    # luxury
    "gucci": "",
    "prada": "",
    "louis vuitton": "",
    "lv": "",
    "balenciaga": "",
    "bottega": "",
    "bottega veneta": "",
    "burberry": "",
    "versace": "",
    "valentino": "",
    "celine": "",
    "céline": "",
    "saint laurent": "",
    "hermès": "",
    "hermes": "",
    "fendi": "",
    "miu miu": "",
    "loewe": "",
    "coach": "",
    "michael kors": "",
    "kate spade": "",
    "tory burch": "",
    # brazilian labels
    "arezzo": "",
    "schutz": "",
    "santa lolla": "",
    "anacapri": "",
    "farm": "",
    "animale": "",
    "le lis": "",
    "le lis blanc": "",
    "maria filó": "",
    "maria filo": "",
    "shoulder": "",
    "mixed": "",
    "bo.bô": "",
    "bobo": "",
    "bo bo": "",
    "osklen": "",
    "ateen": "",
}

SLANG_MAPPINGS: Dict[str, str] = {
    "shorts jeans": "short de denim",
    "short jeans": "short de denim",
    "calça alfaiataria": "calça reta de alfaiataria",
    "calca alfaiataria": "calça reta de alfaiataria",
    "camisa social": "camisa de botão, corte limpo",
    "blusinha": "top leve, alça fina",
    "blusinha básica": "top leve, alça fina",
    "bota cano curto": "bota de cano curto, couro liso",
    "bolsa pequena": "bolsa pequena estruturada",
    "bolsinha": "bolsa pequena estruturada",
    "cropped": "top cropped",
    "croppedzinho": "top cropped",
    "legging": "legging de lycra",
    "calça legging": "legging de lycra",
    "moletom": "moletom de algodão, corte relaxado",
    "jaqueta jeans": "jaqueta de denim",
    "sapatênis": "tênis casual de perfil baixo",
    "sapato social": "oxford de couro",
    "rasteirinha": "sandália rasteira, tiras finas",
    "chinelo": "slide casual",
    "tamanco": "mule de salto bloco",
    "meia calça": "meia-calça fina",
    "brinco argola": "argola dourada",
    "brinco de argola": "argola dourada",
    "colar corrente": "corrente de elos",
    "relogio": "relógio de pulso, pulseira metálica",
    "relógio": "relógio de pulso, pulseira metálica",
    "oculos": "óculos de sol",
    "óculos": "óculos de sol",
    "bone": "boné de aba curva",
    "boné": "boné de aba curva",
    "bucket": "chapéu bucket",
    "bucket hat": "chapéu bucket",
}

# Regional or informal color words -> one fixed vocabulary term. Canonical
# terms that contain a shorter key are listed as identities so they are
# recognised before the shorter key ("azul-marinho" before "marinho").
COLOR_MAPPINGS: Dict[str, str] = {
    "branco": "off-white",
    "off white": "off-white",
    "offwhite": "off-white",
    "off-white": "off-white",
    "creme": "off-white",
    "bege": "bege",
    "nude": "bege",
    "caramelo": "caramelo",
    "marrom": "marrom",
    "café": "marrom",
    "preto": "preto",
    "cinza": "cinza",
    "azul marinho": "azul-marinho",
    "azul-marinho": "azul-marinho",
    "marinho": "azul-marinho",
    "navy": "azul-marinho",
    "jeans claro": "denim claro",
    "jeans escuro": "denim escuro",
    "jeans médio": "denim médio",
    "verde militar": "verde-oliva",
    "verde oliva": "verde-oliva",
    "bordô": "burgundy",
    "bordo": "burgundy",
    "vinho": "burgundy",
    "rosa": "rosa",
    "rosa claro": "rosa-pálido",
    "rosa bebê": "rosa-pálido",
    "rosa-pálido": "rosa-pálido",
    "vermelho": "vermelho",
    "laranja": "terracota",
    "terracota": "terracota",
    "amarelo": "mostarda",
    "mostarda": "mostarda",
    "dourado": "dourado",
    "prata": "prata",
    "metalizado": "metalizado",
}

BRAND_TABLE = MappingTable("brands", BRAND_MAPPINGS)
SLANG_TABLE = MappingTable("slang", SLANG_MAPPINGS)
COLOR_TABLE = MappingTable("colors", COLOR_MAPPINGS)
