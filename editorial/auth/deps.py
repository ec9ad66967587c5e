from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from editorial.auth.jwt import decode_token
from editorial.core.config import settings
from editorial.core.errors import ErrorKind, GenerationError

bearer = HTTPBearer(auto_error=False)


def get_subject_optional(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> Optional[str]:
    if not creds:
        return None
    try:
        data = decode_token(creds.credentials)
    except jwt.PyJWTError:
        return None
    if data.get("typ") != "access":
        return None
    return data.get("sub")


def require_caller(subject: Optional[str] = Depends(get_subject_optional)) -> Optional[str]:
    """Bearer token gate; only enforced when AUTH_REQUIRED is on."""
    if settings.AUTH_REQUIRED and not subject:
        raise GenerationError(ErrorKind.UNAUTHORIZED)
    return subject
