from fastapi import APIRouter

from editorial.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"ok": True, "provider": settings.LLM_PROVIDER}
