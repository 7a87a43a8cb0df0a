"""Tests for the profiles HTTP API."""

import pytest
from httpx import ASGITransport, AsyncClient

from agent_standards.config import Settings
from agent_standards.main import create_application


@pytest.fixture
def app(android_tree, settings):
    """Create test application over the default/android tree."""
    return create_application(settings)


async def _get(app, url, **params):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.get(url, params=params)


@pytest.mark.anyio
async def test_healthz(app, settings):
    response = await _get(app, "/healthz")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["profiles_root"] == str(settings.profiles_root)


@pytest.mark.anyio
async def test_list_profiles_endpoint(app):
    response = await _get(app, "/v1/profiles")

    assert response.status_code == 200
    profiles = {p["name"]: p for p in response.json()}
    assert set(profiles) == {"android", "default"}
    assert profiles["android"]["parent"] == "default"


@pytest.mark.anyio
async def test_get_profile(app):
    response = await _get(app, "/v1/profiles/android")

    assert response.status_code == 200
    body = response.json()
    assert body["chain"] == ["default", "android"]
    assert body["document_count"] == 5
    assert list(body["categories"]) == ["frontend", "global", "testing"]
    components = body["categories"]["frontend"][0]
    assert components == {
        "profile": "android",
        "category": "frontend",
        "filename": "components.md",
        "content": "android composables",
    }
    assert body["warnings"] == [
        {
            "profile": "android",
            "overridden_profile": "default",
            "category": "frontend",
            "filename": "components.md",
        }
    ]


@pytest.mark.anyio
async def test_get_profile_without_content(app):
    response = await _get(app, "/v1/profiles/android", include_content="false")

    assert response.status_code == 200
    for documents in response.json()["categories"].values():
        assert all(doc["content"] is None for doc in documents)


@pytest.mark.anyio
async def test_unknown_profile_404(app):
    response = await _get(app, "/v1/profiles/nonexistent")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "profile_not_found"
    assert data["profile"] == "nonexistent"
    assert data["available"] == ["android", "default"]


@pytest.mark.anyio
async def test_cyclic_profile_409(app, make_profile):
    make_profile("a", config="parent: b\n")
    make_profile("b", config="parent: a\n")

    response = await _get(app, "/v1/profiles/a")

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "cyclic_inheritance"
    assert data["chain"] == ["a", "b", "a"]


@pytest.mark.anyio
async def test_invalid_config_422(app, make_profile):
    make_profile("broken", config="parent: default\nsurprise: true\n")

    response = await _get(app, "/v1/profiles/broken")

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_profile_config"


@pytest.mark.anyio
async def test_category_listing(app):
    response = await _get(app, "/v1/profiles/android/standards/testing")

    assert response.status_code == 200
    assert [(d["filename"], d["profile"]) for d in response.json()] == [
        ("compose-testing.md", "android"),
        ("ui-testing.md", "default"),
        ("unit-testing.md", "default"),
    ]


@pytest.mark.anyio
async def test_unknown_category_404(app):
    response = await _get(app, "/v1/profiles/android/standards/backend")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "category_not_found"
    assert data["available"] == ["frontend", "global", "testing"]


@pytest.mark.anyio
async def test_single_standard(app):
    response = await _get(app, "/v1/profiles/android/standards/testing/ui-testing")

    assert response.status_code == 200
    assert response.json()["content"] == "default ui testing"

    response = await _get(app, "/v1/profiles/android/standards/testing/missing.md")
    assert response.status_code == 404
    assert response.json()["error"] == "standard_not_found"


@pytest.mark.anyio
async def test_reload_picks_up_changes(app, make_profile):
    before = (await _get(app, "/v1/profiles/default")).json()["fingerprint"]
    make_profile("default", {"global/coding-style.md": "rewritten"})

    assert (await _get(app, "/v1/profiles/default")).json()["fingerprint"] == before

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/v1/profiles/reload")
    assert response.status_code == 200

    assert (await _get(app, "/v1/profiles/default")).json()["fingerprint"] != before


@pytest.mark.anyio
async def test_unreadable_standard_500(app, profiles_root):
    bad = profiles_root / "default" / "standards" / "global" / "bad.md"
    bad.write_bytes(b"\xff\xfe\xfa not utf-8")

    response = await _get(app, "/v1/profiles/android")

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "unreadable_standard"
    assert data["profile"] == "default"
    assert data["path"] == str(bad)


@pytest.mark.anyio
async def test_inheritance_depth_409(android_tree, profiles_root):
    app = create_application(Settings(profiles_root=profiles_root, max_inheritance_depth=1))

    response = await _get(app, "/v1/profiles/android")

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "cyclic_inheritance"
    assert data["chain"] == ["android"]
    assert (await _get(app, "/v1/profiles/default")).status_code == 200


@pytest.mark.anyio
async def test_missing_parent_404(app, make_profile):
    make_profile("orphan", {"global/a.md": "a"}, config="parent: nowhere\n")

    response = await _get(app, "/v1/profiles/orphan")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "profile_not_found"
    assert data["profile"] == "nowhere"


@pytest.mark.anyio
async def test_list_profiles_with_broken_sibling(app, make_profile):
    make_profile("loop", config="parent: loop\n")

    response = await _get(app, "/v1/profiles")

    assert response.status_code == 200
    profiles = {p["name"]: p for p in response.json()}
    assert profiles["android"]["error"] is None
    assert profiles["android"]["chain"] == ["default", "android"]
    assert profiles["loop"]["error"].startswith("Cyclic inheritance")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/v1/profiles/reload")
    assert response.status_code == 200
    assert {p["name"] for p in response.json()} == {"android", "default", "loop"}
