import pytest
from fastapi.testclient import TestClient

from main import create_app

from .conftest import ADMIN_HEADERS, USER_HEADERS

INDEX_HTML = "<!doctype html><div id=root></div>"


@pytest.fixture
def dist(tmp_path):
    root = tmp_path / "dist"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (root / "assets" / "app.js").write_text("console.log('app')", encoding="utf-8")
    return root


@pytest.fixture
def spa_client(settings, dist):
    settings.frontend_dist = dist
    return TestClient(create_app(settings))


def test_index_and_assets_are_served(spa_client):
    resp = spa_client.get("/")
    assert resp.status_code == 200
    assert resp.text == INDEX_HTML
    assert spa_client.get("/assets/app.js").text == "console.log('app')"


def test_client_routes_fall_back_to_index(spa_client):
    for path in ("/login", "/dashboard/videos"):
        resp = spa_client.get(path)
        assert resp.status_code == 200, path
        assert resp.text == INDEX_HTML


def test_api_prefix_reaches_the_api(spa_client):
    assert spa_client.get("/api/health").json()["status"] == "OK"
    assert spa_client.get("/api/videos", headers=USER_HEADERS).json() == []

    resp = spa_client.post(
        "/api/videos/upload",
        files={"video": ("clip.mp4", b"abc", "video/mp4")},
        data={"title": "Clip"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 201
    location_id = resp.json()["video"]["locationId"]
    assert spa_client.post(f"/api/videos/{location_id}/view").json()["views"] == 1
    assert spa_client.get("/videos", headers=USER_HEADERS).json()[0]["views"] == 1


def test_unknown_api_path_is_a_json_404(spa_client):
    for path in ("/api/nothing", "/api"):
        resp = spa_client.get(path)
        assert resp.status_code == 404, path
        assert resp.json() == {"detail": "API route not found"}


def test_custom_api_prefix(settings, dist):
    settings.frontend_dist = dist
    settings.api_prefix = "/backend"
    client = TestClient(create_app(settings))
    assert client.get("/backend/health").status_code == 200
    assert client.get("/backend/missing").json() == {"detail": "API route not found"}
    assert client.get("/api/health").text == INDEX_HTML
