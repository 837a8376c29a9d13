"""HTTP-level tests against the FastAPI app with outbound traffic mocked."""
import io

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from preview_api.app import app
from preview_api.common.errors import PREVIEW_UNAVAILABLE_MESSAGE
from helpers import EXAMPLE_DOMAIN_HTML, FULL_OG_HTML, FakeSite


@pytest.fixture
def api_site():
    return FakeSite()


@pytest.fixture
def client(api_site):
    app.state.http_transport = api_site.transport
    with TestClient(app) as test_client:
        yield test_client
    app.state.http_transport = None


class TestPreviewEndpoint:
    def test_creates_preview(self, client, api_site):
        api_site.page("https://example.com", EXAMPLE_DOMAIN_HTML)

        response = client.post("/api/preview", json={"url": "https://example.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["url"] == "https://example.com"
        assert body["title"] == "Example Domain"
        assert body["description"] == ""
        assert body["image"] == ""
        assert body["favicon"] == ""
        assert body["siteName"] == ""
        assert set(body) == {
            "id",
            "url",
            "title",
            "description",
            "image",
            "favicon",
            "siteName",
            "createdAt",
        }

    def test_cached_response_is_identical(self, client, api_site):
        api_site.page("https://example.com", EXAMPLE_DOMAIN_HTML)
        first = client.post("/api/preview", json={"url": "https://example.com"})
        api_site.requests.clear()

        second = client.post("/api/preview", json={"url": "https://example.com"})

        assert second.content == first.content
        assert api_site.requests == []

    def test_force_refresh(self, client, api_site):
        api_site.page("https://ex.com/page", EXAMPLE_DOMAIN_HTML)
        first = client.post("/api/preview", json={"url": "https://ex.com/page"}).json()

        api_site.page("https://ex.com/page", FULL_OG_HTML)
        refreshed = client.post(
            "/api/preview", json={"url": "https://ex.com/page", "forceRefresh": True}
        ).json()

        assert refreshed["id"] == first["id"]
        assert refreshed["createdAt"] == first["createdAt"]
        assert refreshed["title"] == "OG Title"
        assert refreshed["image"] == "https://ex.com/img.png"
        assert refreshed["siteName"] == "Example Site"

    @pytest.mark.parametrize(
        "url", ["not a url", "ftp://example.com/file", "https://", "example.com"]
    )
    def test_invalid_url(self, client, url):
        response = client.post("/api/preview", json={"url": url})

        assert response.status_code == 400
        assert response.json() == {"message": "Please enter a valid URL"}

    def test_missing_url(self, client):
        response = client.post("/api/preview", json={})
        assert response.status_code == 400
        assert "url" in response.json()["message"]

    def test_unreachable_site(self, client, api_site):
        def refuse(request):
            raise httpx.ConnectError("name resolution failed", request=request)

        api_site.route("GET", "http://nonexistent.invalid", refuse)

        response = client.post("/api/preview", json={"url": "http://nonexistent.invalid"})

        assert response.status_code == 400
        assert response.json() == {"message": PREVIEW_UNAVAILABLE_MESSAGE}

    def test_get_by_id(self, client, api_site):
        api_site.page("https://example.com", EXAMPLE_DOMAIN_HTML)
        created = client.post("/api/preview", json={"url": "https://example.com"}).json()

        response = client.get(f"/api/preview/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created
        assert client.get("/api/preview/999").status_code == 404

    def test_store_is_fresh_per_app_start(self, client, api_site):
        api_site.page("https://example.com", EXAMPLE_DOMAIN_HTML)
        assert client.post("/api/preview", json={"url": "https://example.com"}).json()["id"] == 1


class TestStylesEndpoint:
    def test_list(self, client):
        response = client.get("/api/styles")

        assert response.status_code == 200
        styles = response.json()
        assert [s["name"] for s in styles] == ["Default", "Dark", "Minimal", "Card"]
        assert styles[0]["borderRadius"] == "12px"
        assert styles[2]["showImage"] is False
        assert styles[3]["layout"] == "vertical"

    def test_create_and_get(self, client):
        payload = {
            "name": "Ocean",
            "borderRadius": "10px",
            "borderColor": "#0ea5e9",
            "backgroundColor": "#f0f9ff",
            "textColor": "#0c4a6e",
            "accentColor": "#0284c7",
            "layout": "compact",
        }

        response = client.post("/api/styles", json=payload)

        assert response.status_code == 201
        created = response.json()
        assert created["id"] == 5
        assert created["showImage"] is True
        assert client.get("/api/styles/5").json() == created
        assert len(client.get("/api/styles").json()) == 5

    def test_create_invalid(self, client):
        response = client.post("/api/styles", json={"name": "Bad", "borderColor": "red"})

        assert response.status_code == 400
        assert "message" in response.json()

    def test_unknown_style(self, client):
        response = client.get("/api/styles/42")
        assert response.status_code == 404
        assert response.json() == {"message": "Style not found"}


class TestExportEndpoint:
    def _create_preview(self, client, api_site) -> int:
        api_site.page("https://example.com", EXAMPLE_DOMAIN_HTML)
        return client.post("/api/preview", json={"url": "https://example.com"}).json()["id"]

    def test_export_jpeg(self, client, api_site):
        preview_id = self._create_preview(client, api_site)

        response = client.post(
            "/api/export",
            json={
                "previewId": preview_id,
                "format": "jpeg",
                "width": 600,
                "height": 300,
                "quality": 0.5,
            },
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["content-disposition"].startswith("attachment")
        assert f"preview-{preview_id}.jpeg" in response.headers["content-disposition"]
        assert Image.open(io.BytesIO(response.content)).size == (600, 300)

    def test_export_unknown_preview(self, client):
        response = client.post("/api/export", json={"previewId": 123, "format": "png"})
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "override",
        [
            {"format": "gif"},
            {"width": 199},
            {"width": 2001},
            {"height": 99},
            {"height": 1001},
            {"quality": 0.05},
            {"quality": 1.5},
        ],
    )
    def test_export_input_bounds(self, client, override):
        body = {"previewId": 1, "format": "png", "width": 800, "height": 400, "quality": 0.9}
        response = client.post("/api/export", json={**body, **override})
        assert response.status_code == 400


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "Healthy"
        assert body["entities"][0]["alias"] == "preview_store"
