from datetime import datetime, timezone

import pytest
from flask_jwt_extended import create_access_token

from sitebuilder.extensions import db
from sitebuilder.models import Page, Post, Product, Tenant

ACME = "http://acme.example.com"


@pytest.fixture
def site(app):
    db.session.add_all([
        Tenant(
            id="t-acme", name="Acme", subdomain="acme", status="active",
            settings={
                "navigation": {"links": [{"label": "Home", "href": "/"}]},
                "footer": {"copyright": "© Acme"},
            },
            updated_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
        ),
        Tenant(id="t-dormant", name="Dormant", subdomain="dormant", status="inactive"),
        Page(
            tenant_id="t-acme", slug="home", title="Home", is_published=True,
            content_blocks=[
                {"id": "hero", "type": "hero", "display_order": 0, "content": {"title": "Hi"}},
                {"id": "grid", "type": "listing-views", "display_order": 1, "content": {"itemsToShow": 2}},
                {"id": "oops", "type": "sparkles", "display_order": 2},
            ],
            updated_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
        ),
        Product(
            tenant_id="t-acme", slug="widget", title="Widget", is_published=True,
            content_blocks=[{"type": "product-hero", "display_order": 0, "content": {"title": "Widget"}}],
        ),
        Product(tenant_id="t-acme", slug="bare", title="Bare", description="Nothing yet", is_published=True),
        Post(tenant_id="t-acme", slug="hello", title="Hello", is_published=True, content_blocks=[]),
        Page(tenant_id="t-dormant", slug="home", title="Home", is_published=True, content_blocks=[]),
    ])
    db.session.commit()
    return app


def block_types(response):
    return [b["type"] for b in response.get_json()["blocks"]]


def token(app, **claims):
    with app.app_context():
        return create_access_token(identity="user-1", additional_claims=claims)


# -------------------------------------------------
# Public renderer
# -------------------------------------------------

def test_home(client, site):
    response = client.get("/", base_url=ACME)

    assert response.status_code == 200
    body = response.get_json()
    assert block_types(response) == ["navigation", "hero", "listing-views", "footer"]
    assert body["tenant"]["subdomain"] == "acme"
    assert "navigation" not in body["tenant"]["settings"]
    assert body["blocks"][0]["display_order"] is None
    assert "diagnostics" not in body
    grid = body["listing_data"]["grid"]
    assert grid["total"] == 2
    assert sorted(i["slug"] for i in grid["items"]) == ["bare", "widget"]
    assert response.headers["X-Request-ID"]


def test_product_route(client, site):
    response = client.get("/products/widget", base_url=ACME)

    assert response.status_code == 200
    assert block_types(response) == ["navigation", "product-hero", "footer"]
    assert response.get_json()["entity"]["slug"] == "widget"


def test_product_without_blocks_gets_fallback(client, site):
    response = client.get("/products/bare", base_url=ACME)

    hero = response.get_json()["blocks"][1]
    assert hero["type"] == "product-hero"
    assert hero["content"]["subtitle"] == "Nothing yet"


def test_catch_all_and_subdomain_routes(client, site):
    assert block_types(client.get("/posts/hello", base_url=ACME)) == ["navigation", "hero", "footer"]
    assert client.get("/hello", base_url=ACME).get_json()["kind"] == "post"
    assert client.get("/sites/acme/products/widget").get_json()["entity"]["slug"] == "widget"
    assert client.get("/sites/acme/").status_code == 200


@pytest.mark.parametrize("url, base_url", [
    ("/", "http://nobody.example.com"),
    ("/", "http://dormant.example.com"),
    ("/products/missing", ACME),
    ("/sites/acme/a..b", "http://localhost"),
    ("/sites/nobody/", "http://localhost"),
])
def test_not_found(client, site, url, base_url):
    response = client.get(url, base_url=base_url)

    assert response.status_code == 404
    assert response.get_json()["error"] == "NotFound"


def test_conditional_get(client, site):
    first = client.get("/", base_url=ACME)
    last_modified = first.headers["Last-Modified"]

    assert last_modified == "Fri, 01 Mar 2024 00:00:00 GMT"

    second = client.get("/", base_url=ACME, headers={"If-Modified-Since": last_modified})
    assert second.status_code == 304

    stale = client.get("/", base_url=ACME, headers={"If-Modified-Since": "Mon, 01 Jan 2024 00:00:00 GMT"})
    assert stale.status_code == 200

    garbage = client.get("/", base_url=ACME, headers={"If-Modified-Since": "yesterday-ish"})
    assert garbage.status_code == 200


def test_storage_error_is_a_json_500(client, site):
    db.drop_all()

    response = client.get("/", base_url=ACME)

    assert response.status_code == 500
    assert response.get_json()["error"] == "StorageError"


def test_request_id_is_echoed(client, site):
    response = client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


# -------------------------------------------------
# API v1
# -------------------------------------------------

def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "service": "sitebuilder"}


def test_listing(client, site):
    response = client.get(
        "/api/v1/sites/listing/products?per_page=1&page=2&sort_by=title&sort_order=asc",
        base_url=ACME,
    )

    assert response.status_code == 200
    body = response.get_json()
    assert [i["slug"] for i in body["items"]] == ["widget"]
    assert body["pagination"] == {"page": 2, "per_page": 1, "total": 2, "total_pages": 2}


@pytest.mark.parametrize("query", ["page=0", "per_page=abc", "sort_by=price", "sort_order=up"])
def test_listing_rejects_bad_arguments(client, site, query):
    response = client.get(f"/api/v1/sites/listing/products?{query}", base_url=ACME)

    assert response.status_code == 400
    assert response.get_json()["error"] == "BadRequest"


def test_listing_unknown_kind(client, site):
    assert client.get("/api/v1/sites/listing/widgets", base_url=ACME).status_code == 404


def test_admin_preview_includes_diagnostics(app, client, site):
    headers = {"Authorization": f"Bearer {token(app, role='admin', tenant_id='t-acme')}"}

    response = client.get("/api/v1/admin/sites/t-acme/preview", headers=headers)

    assert response.status_code == 200
    body = response.get_json()
    assert [d["block_id"] for d in body["diagnostics"]] == ["oops"]
    assert body["blocks"][0]["source"] == "shared"


def test_admin_preview_renders_inactive_site(app, client, site):
    headers = {"Authorization": f"Bearer {token(app, role='admin', tenant_id='t-dormant')}"}

    response = client.get("/api/v1/admin/sites/t-dormant/preview?path=/", headers=headers)

    assert response.status_code == 200
    assert response.get_json()["tenant"]["status"] == "inactive"


@pytest.mark.parametrize("claims, status", [
    ({"role": "editor", "tenant_id": "t-acme"}, 403),
    ({"role": "admin", "tenant_id": "t-other"}, 403),
])
def test_admin_preview_authorization(app, client, site, claims, status):
    headers = {"Authorization": f"Bearer {token(app, **claims)}"}

    assert client.get("/api/v1/admin/sites/t-acme/preview", headers=headers).status_code == status


def test_admin_preview_requires_token(client, site):
    assert client.get("/api/v1/admin/sites/t-acme/preview").status_code == 401


def test_openapi_document_is_served(client):
    response = client.get("/openapi/site.yaml")

    assert response.status_code == 200
    assert b"openapi: 3.0.3" in response.data
