import time
import jwt
from typing import Any, Dict

from editorial.core.config import settings

ACCESS_TTL = 3600


def mint_access(subject: str, ttl: int = ACCESS_TTL) -> str:
    now = int(time.time())
    return jwt.encode(
        {"sub": subject, "iat": now, "exp": now + ttl, "typ": "access"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )


def decode_token(tok: str) -> Dict[str, Any]:
    return jwt.decode(tok, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
