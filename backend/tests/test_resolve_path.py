import pytest

from sitebuilder.application.site.resolve_path import (
    resolve_content_path,
    sanitize_segments,
    sanitize_site_segment,
    url_prefixes,
)
from sitebuilder.domain.content import ContentKind


@pytest.mark.parametrize("path, expected", [
    (None, []),
    ("", []),
    ("/", []),
    ("about", ["about"]),
    ("/blog//2024/ hello /", ["blog", "2024", "hello"]),
    (["products", "widget"], ["products", "widget"]),
])
def test_sanitize_segments_accepts_safe_paths(path, expected):
    assert sanitize_segments(path) == expected


@pytest.mark.parametrize("path", [
    "../etc/passwd",
    "blog/..",
    "a..b",
    ["ok", "x/y"],
    ["ok", "x\\y"],
    ["ok", None],
])
def test_sanitize_segments_rejects_traversal(path):
    assert sanitize_segments(path) is None


@pytest.mark.parametrize("value, expected", [
    ("acme", "acme"),
    (" acme ", "acme"),
    ("", None),
    (None, None),
    ("..", None),
    ("a/b", None),
])
def test_sanitize_site_segment(value, expected):
    assert sanitize_site_segment(value) == expected


def test_url_prefixes_merge_tenant_overrides(make_record):
    tenant = make_record("acme", "acme", settings={"url_prefixes": {"products": "/shop/"}})

    assert url_prefixes(tenant) == {
        "pages": ContentKind.PAGE,
        "shop": ContentKind.PRODUCT,
        "posts": ContentKind.POST,
    }


async def _lookup(tenant, path, repos):
    return await resolve_content_path(tenant, sanitize_segments(path), repos)


@pytest.mark.asyncio
async def test_prefixed_path_looks_up_that_kind_only(make_record, make_entity, content_repos):
    tenant = make_record("acme", "acme")

    match = await _lookup(tenant, "products/widget", content_repos)

    assert match.kind is ContentKind.PRODUCT
    assert match.entity.slug == "widget"
    assert content_repos[ContentKind.PAGE].calls == []


@pytest.mark.asyncio
async def test_bare_slug_tries_page_then_post_then_product(make_record, content_repos):
    tenant = make_record("acme", "acme")

    match = await _lookup(tenant, "widget", content_repos)

    assert match.kind is ContentKind.PRODUCT
    assert content_repos[ContentKind.PAGE].calls == [("get_by_slug", "acme", "widget")]
    assert content_repos[ContentKind.POST].calls == [("get_by_slug", "acme", "widget")]


@pytest.mark.asyncio
async def test_custom_prefix_hides_kind_from_bare_lookup(make_record, content_repos):
    tenant = make_record("acme", "acme", settings={"url_prefixes": {"products": "shop"}})

    assert await _lookup(tenant, "widget", content_repos) is None
    assert (await _lookup(tenant, "shop/widget", content_repos)).entity.slug == "widget"


@pytest.mark.asyncio
async def test_unmatched_prefix_falls_back_to_full_path(make_record, make_entity, content_repos):
    tenant = make_record("acme", "acme")
    content_repos[ContentKind.PAGE].entities.append(
        make_entity("acme", ContentKind.PAGE, "posts/archive")
    )

    match = await _lookup(tenant, "posts/archive", content_repos)

    assert match.kind is ContentKind.PAGE
    assert match.entity.slug == "posts/archive"


@pytest.mark.asyncio
async def test_prefix_set_to_its_default_keeps_bare_lookup(make_record, content_repos):
    tenant = make_record("acme", "acme", settings={"url_prefixes": {"products": "/products/"}})

    match = await _lookup(tenant, "widget", content_repos)

    assert match.kind is ContentKind.PRODUCT
