import httpx
import pytest

from editorial.auth.jwt import mint_access
from editorial.core.config import settings
from tests.fixtures import CAPSULE_PAYLOAD, EDITORIAL_PAYLOAD, INLINE_IMAGE, STUDIO_PAYLOAD, wrapped


@pytest.mark.asyncio
async def test_editorial_success(client: httpx.AsyncClient, provider):
    provider.replies = [wrapped(EDITORIAL_PAYLOAD)]
    r = await client.post("/v1/generate/editorial", json={"images": [INLINE_IMAGE] * 3, "preferences": {"occasion": "noite"}})
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"profile", "editorial"}
    assert body["editorial"]["outfits"][0]["accessory"] == "Bolsa"
    assert "Ocasião: noite" in provider.prompts[0].user_content[0]["text"]


@pytest.mark.asyncio
async def test_application_failure_is_200_with_debug_id(client: httpx.AsyncClient, provider):
    provider.replies = ["no json here"]
    r = await client.post("/v1/generate/editorial", json={"images": [INLINE_IMAGE] * 3})
    assert r.status_code == 200
    body = r.json()
    assert body["error"] == "no_json_in_response"
    assert body["debug_id"].startswith("dbg_")
    assert provider.calls == 2


@pytest.mark.asyncio
async def test_preflight_rejection(client: httpx.AsyncClient, provider):
    r = await client.post("/v1/generate/global-editorial", json={"images": [INLINE_IMAGE]})
    assert r.status_code == 200
    body = r.json()
    assert body["error"] == "invalid_input"
    assert body["debug_id"].startswith("glb_")
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_malformed_body_is_invalid_input(client: httpx.AsyncClient, provider):
    r = await client.post("/v1/generate/editorial", json={"images": "not-a-list"})
    assert r.status_code == 200
    assert r.json()["error"] == "invalid_input"


@pytest.mark.asyncio
async def test_studio_brands_only(client: httpx.AsyncClient, provider):
    provider.replies = [wrapped(STUDIO_PAYLOAD)]
    r = await client.post("/v1/generate/studio", json={"brandRefs": ["Jacquemus", "Toteme"], "category": "fashion"})
    assert r.status_code == 200
    assert r.json()["commerce"]["look_recipes"][0]["formula"] == "Wide trousers + knit"
    assert provider.prompts[0].variant == "studio"


@pytest.mark.asyncio
async def test_capsule_flow(client: httpx.AsyncClient, provider):
    provider.replies = [wrapped(CAPSULE_PAYLOAD)]
    r = await client.post(
        "/v1/generate/capsule",
        json={"aesthetic_id": "minimal_chic", "owned_items_text": "tênis Vans branco, calça jeans escuro, jaqueta jeans"},
    )
    assert r.status_code == 200
    assert r.json()["covered"] == ["Jeans escuro", "Camisa branca"]


@pytest.mark.asyncio
async def test_capsule_insufficient_items(client: httpx.AsyncClient, provider):
    r = await client.post("/v1/generate/capsule", json={"aesthetic_id": "minimal_chic", "owned_items_text": "jeans"})
    assert r.status_code == 200
    assert r.json()["error"] == "insufficient_items"
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_unknown_variant_404(client: httpx.AsyncClient, provider):
    r = await client.post("/v1/generate/poster", json={})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_rate_limited(client: httpx.AsyncClient, provider, override_rate_limiter):
    override_rate_limiter.max_requests = 1
    provider.replies = [wrapped(EDITORIAL_PAYLOAD)]
    body = {"images": [INLINE_IMAGE] * 3}
    headers = {"X-Forwarded-For": "203.0.113.9"}
    first = await client.post("/v1/generate/editorial", json=body, headers=headers)
    second = await client.post("/v1/generate/editorial", json=body, headers=headers)
    assert first.status_code == 200
    assert second.status_code == 429
    assert second.json()["error"] == "rate_limited"
    assert second.json()["retry_after"] == 42
    assert second.headers["retry-after"] == "42"
    assert "rl:editorial:203.0.113.9" in override_rate_limiter.counts


@pytest.mark.asyncio
async def test_auth_required(client: httpx.AsyncClient, provider, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_REQUIRED", True)
    provider.replies = [wrapped(EDITORIAL_PAYLOAD)]
    body = {"images": [INLINE_IMAGE] * 3}
    denied = await client.post("/v1/generate/editorial", json=body)
    assert denied.status_code == 401
    assert denied.json()["error"] == "unauthorized"
    bad = await client.post("/v1/generate/editorial", json=body, headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401
    ok = await client.post("/v1/generate/editorial", json=body, headers={"Authorization": f"Bearer {mint_access('tester')}"})
    assert ok.status_code == 200


@pytest.mark.asyncio
async def test_health(client: httpx.AsyncClient, provider):
    r = await client.get("/v1/health")
    assert r.json() == {"ok": True, "provider": "scripted"}
