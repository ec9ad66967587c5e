from __future__ import annotations

import secrets
import string
import time
from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    INSUFFICIENT_ITEMS = "insufficient_items"
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    SELFIE_NOT_ALLOWED = "selfie_not_allowed"
    CONTENT_NOT_ALLOWED = "content_not_allowed"
    NO_JSON_IN_RESPONSE = "no_json_in_response"
    MALFORMED_JSON = "malformed_json"
    INCOMPLETE_STRUCTURE = "incomplete_structure"
    GATEWAY_ERROR = "gateway_error"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"

    @classmethod
    def parse(cls, value: object) -> "ErrorKind":
        """Map a wire value onto the taxonomy; anything unknown is a server fault."""
        try:
            return cls(value)
        except ValueError:
            return cls.SERVER_ERROR


# Transient failures get one silent retry at each retry site. Everything else
# needs the user to act (fix input, wait, re-authenticate, change images).
RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.NO_JSON_IN_RESPONSE,
        ErrorKind.MALFORMED_JSON,
        ErrorKind.INCOMPLETE_STRUCTURE,
        ErrorKind.GATEWAY_ERROR,
        ErrorKind.NETWORK_ERROR,
        ErrorKind.SERVER_ERROR,
    }
)

HTTP_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.SERVER_ERROR: 500,
}


def is_retryable(kind: ErrorKind) -> bool:
    return kind in RETRYABLE_KINDS


def http_status_for(kind: ErrorKind) -> int:
    return HTTP_STATUS.get(kind, 200)


MESSAGES: Dict[str, Dict[ErrorKind, str]] = {
    "pt": {
        ErrorKind.INVALID_INPUT: "Revise as referências enviadas e tente novamente.",
        ErrorKind.INSUFFICIENT_ITEMS: "Você pode citar 3 a 6 peças, mesmo básicas, para eu fechar a cápsula com precisão.",
        ErrorKind.RATE_LIMITED: "Muitas requisições. Tente novamente em breve.",
        ErrorKind.UNAUTHORIZED: "Acesso não autorizado.",
        ErrorKind.SELFIE_NOT_ALLOWED: "Não analisamos selfies ou fotos pessoais. Envie referências de estilo.",
        ErrorKind.CONTENT_NOT_ALLOWED: "Uma das referências não segue a política de conteúdo. Envie outras imagens.",
        ErrorKind.NO_JSON_IN_RESPONSE: "A IA não retornou um editorial estruturado. Tente novamente.",
        ErrorKind.MALFORMED_JSON: "O editorial gerado estava incompleto. Tente novamente.",
        ErrorKind.INCOMPLETE_STRUCTURE: "O editorial gerado está incompleto. Tente novamente.",
        ErrorKind.GATEWAY_ERROR: "O serviço de IA está temporariamente indisponível.",
        ErrorKind.NETWORK_ERROR: "Erro de conexão. Tente novamente.",
        ErrorKind.SERVER_ERROR: "Erro interno do servidor. Tente novamente.",
    },
    "en": {
        ErrorKind.INVALID_INPUT: "Check your references and try again.",
        ErrorKind.INSUFFICIENT_ITEMS: "List 3 to 6 pieces, even basic ones, so the edit can be precise.",
        ErrorKind.RATE_LIMITED: "Too many requests. Please try again later.",
        ErrorKind.UNAUTHORIZED: "Unauthorized access.",
        ErrorKind.SELFIE_NOT_ALLOWED: "Selfies and personal photos are not analyzed. Send style references instead.",
        ErrorKind.CONTENT_NOT_ALLOWED: "One of the references does not follow the content policy. Send different images.",
        ErrorKind.NO_JSON_IN_RESPONSE: "The model did not return a structured editorial. Please try again.",
        ErrorKind.MALFORMED_JSON: "Error processing response. Please try again.",
        ErrorKind.INCOMPLETE_STRUCTURE: "Incomplete response. Please try again.",
        ErrorKind.GATEWAY_ERROR: "Could not generate the editorial. Please try again.",
        ErrorKind.NETWORK_ERROR: "Connection error. Please try again.",
        ErrorKind.SERVER_ERROR: "Internal error. Please try again.",
    },
}


def default_message(kind: ErrorKind, lang: str = "pt") -> str:
    return MESSAGES.get(lang, MESSAGES["pt"])[kind]


class GenerationError(Exception):
    """A classified pipeline failure; converted to a Failure outcome at the attempt boundary."""

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        *,
        lang: str = "pt",
        retry_after: Optional[int] = None,
    ):
        self.kind = kind
        self.message = message or default_message(kind, lang)
        self.retry_after = retry_after
        super().__init__(f"{kind.value}: {self.message}")

    @property
    def retryable(self) -> bool:
        return is_retryable(self.kind)


_B36 = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_B36[r])
    return "".join(reversed(out))


def new_debug_id(prefix: str = "dbg") -> str:
    """Short id used to correlate one request's log lines with its failure body."""
    suffix = "".join(secrets.choice(_B36) for _ in range(6))
    return f"{prefix}_{_base36(int(time.time() * 1000))}_{suffix}"
