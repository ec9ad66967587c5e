import httpx
import pytest
from asgi_lifespan import LifespanManager

from editorial.core import ratelimit
from editorial.core.config import settings
from editorial.main import app
from editorial.services.generation.providers import ProviderRegistry
from tests.fixtures.providers import InMemoryLimiter, ScriptedProvider


@pytest.fixture(autouse=True)
def override_rate_limiter():
    limiter = InMemoryLimiter()
    app.dependency_overrides[ratelimit.get_rate_limiter] = lambda: limiter
    yield limiter
    app.dependency_overrides.pop(ratelimit.get_rate_limiter, None)


@pytest.fixture
def provider(monkeypatch):
    prov = ScriptedProvider()
    ProviderRegistry.register("scripted", prov)
    monkeypatch.setattr(settings, "LLM_PROVIDER", "scripted")
    yield prov
    ProviderRegistry.unregister("scripted")


@pytest.fixture
async def client():
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
