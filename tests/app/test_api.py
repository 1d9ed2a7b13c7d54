import pytest
from fastapi.testclient import TestClient

from src.app.api import create_app, is_authorized
from src.core.scraper.renderer import RenderedPage, RenderError
from src.core.utils.settings import Settings

PRODUCT_HTML = """
<html><head>
<script type="application/ld+json">
{"@type": "Product", "name": "Widget", "image": "/img/w.jpg",
 "offers": {"price": "19,99", "priceCurrency": "EUR"}}
</script>
</head><body></body></html>
"""


class FakeRenderer:
    """Renderer stand-in that returns canned pages or raises."""

    def __init__(self, page=None, error=None):
        self.page = page
        self.error = error
        self.calls = []

    async def render(self, url):
        self.calls.append(url)
        if self.error:
            raise self.error
        return self.page


@pytest.fixture
def renderer():
    return FakeRenderer(
        page=RenderedPage(html=PRODUCT_HTML, url="https://shop.example/products/widget")
    )


@pytest.fixture
def client(renderer):
    app = create_app(renderer=renderer, settings=Settings(scraper_token="s3cret"))
    with TestClient(app) as client:
        yield client


AUTH = {"Authorization": "Bearer s3cret"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_scrape_returns_product(client, renderer):
    response = client.post("/scrape", json={"url": "https://shop.example/p/1"}, headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["url"] == "https://shop.example/p/1"
    assert body["html"] == PRODUCT_HTML
    assert body["title"] == "Widget"
    assert body["imageUrl"] == "https://shop.example/img/w.jpg"
    assert body["price"] == 19.99
    assert body["currency"] == "EUR"
    assert isinstance(body["ms"], int)
    assert renderer.calls == ["https://shop.example/p/1"]


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer wrong"}, {"Authorization": "s3cret"}])
def test_scrape_rejects_bad_token(client, renderer, headers):
    response = client.post("/scrape", json={"url": "https://shop.example/"}, headers=headers)

    assert response.status_code == 401
    assert response.json() == {"ok": False, "error": "unauthorized"}
    assert renderer.calls == []


@pytest.mark.parametrize(
    "payload",
    [{}, {"url": ""}, {"url": 42}, {"url": "ftp://shop.example/"}, {"url": "shop.example"}, ["https://a"]],
)
def test_scrape_rejects_invalid_url(client, renderer, payload):
    response = client.post("/scrape", json=payload, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"ok": False, "error": "invalid url"}
    assert renderer.calls == []


def test_scrape_rejects_non_json_body(client):
    response = client.post("/scrape", content=b"url=https://a", headers=AUTH)
    assert response.status_code == 400


def test_scrape_reports_render_failure():
    renderer = FakeRenderer(error=RenderError("https://down.example/", "Timeout 30000ms exceeded"))
    app = create_app(renderer=renderer, settings=Settings())

    with TestClient(app) as client:
        response = client.post("/scrape", json={"url": "https://down.example/"})

    assert response.status_code == 502
    body = response.json()
    assert body["ok"] is False
    assert body["url"] == "https://down.example/"
    assert body["error"] == "Timeout 30000ms exceeded"
    assert isinstance(body["ms"], int)


def test_scrape_without_configured_token_needs_no_header():
    renderer = FakeRenderer(page=RenderedPage(html="", url="https://shop.example/"))
    app = create_app(renderer=renderer, settings=Settings())

    with TestClient(app) as client:
        response = client.post("/scrape", json={"url": "HTTPS://shop.example/"})

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == ""
    assert body["imageUrl"] == ""
    assert body["price"] is None
    assert body["currency"] is None


@pytest.mark.parametrize(
    "header,token,expected",
    [
        (None, "", True),
        ("Bearer x", "", True),
        ("Bearer x", "x", True),
        ("Bearer y", "x", False),
        (None, "x", False),
    ],
)
def test_is_authorized(header, token, expected):
    assert is_authorized(header, token) is expected
