"""
Test fixtures.

- Flask app on in-memory SQLite (testing config) with tables created
- In-memory tenant/content repositories that record every call, used to
  drive SitePipeline without a database
- A small set of sample sites covering each status and host rule
"""

from datetime import datetime, timezone

import pytest

from sitebuilder import create_app
from sitebuilder.application.site.render_site import SitePipeline
from sitebuilder.application.site.tenant_directory import StaticTenantDirectory
from sitebuilder.domain.blocks import FOOTER_ORDER, NAVIGATION_ORDER, Block
from sitebuilder.domain.content import ContentEntity, ContentKind
from sitebuilder.domain.exceptions import StorageError
from sitebuilder.domain.lifecycle.tenant import VisibilityPolicy
from sitebuilder.domain.tenant import SharedBlocks, TenantRecord, TenantStatus
from sitebuilder.extensions import db as _db
from sitebuilder.repositories.base import TenantBundle

UPDATED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


# -------------------------------------------------
# App
# -------------------------------------------------

@pytest.fixture
def app():
    application = create_app("testing")

    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# -------------------------------------------------
# Builders
# -------------------------------------------------

def _record(
    id,
    subdomain,
    *,
    status=TenantStatus.ACTIVE,
    custom_domain=None,
    navigation=None,
    footer=None,
    settings=None,
):
    return TenantRecord(
        id=id,
        name=id.title(),
        subdomain=subdomain,
        custom_domain=custom_domain,
        status=status,
        settings=settings or {},
        shared=SharedBlocks(
            navigation=Block(
                id="site-navigation", type="navigation", content=navigation,
                display_order=NAVIGATION_ORDER, source="shared",
            ) if navigation is not None else None,
            footer=Block(
                id="site-footer", type="footer", content=footer,
                display_order=FOOTER_ORDER, source="shared",
            ) if footer is not None else None,
        ),
        updated_at=UPDATED_AT,
    )


def _entity(tenant_id, kind, slug, blocks=(), *, is_published=True, **fields):
    return ContentEntity(
        id=f"{kind.value}-{tenant_id}-{slug}",
        tenant_id=tenant_id,
        kind=kind,
        slug=slug,
        title=fields.pop("title", slug.title()),
        is_published=is_published,
        blocks=list(blocks),
        updated_at=fields.pop("updated_at", UPDATED_AT),
        **fields,
    )


@pytest.fixture
def make_record():
    return _record


@pytest.fixture
def make_entity():
    return _entity


# -------------------------------------------------
# In-memory repositories
# -------------------------------------------------

class FakeTenantRepository:
    def __init__(self, records, *, policy=None, homepage_slug="home"):
        self.records = {r.id: r for r in records}
        self.pages = {}
        self.policy = policy or VisibilityPolicy()
        self.homepage_slug = homepage_slug
        self.calls = []

    def add_page(self, entity):
        self.pages[(entity.tenant_id, entity.slug)] = entity

    async def get_identity(self, tenant_id):
        self.calls.append(("get_identity", tenant_id))
        record = self.records.get(tenant_id)
        return record.identity if record else None

    async def load(self, identity, page_slug=None, *, with_blocks=True, enforce_visibility=True):
        self.calls.append(("load", identity.id, page_slug, with_blocks))

        record = self.records.get(identity.id)
        if record is None:
            return None
        if enforce_visibility and not self.policy.is_visible(record.status):
            return None
        if not with_blocks:
            return TenantBundle(tenant=record)

        page = self.pages.get((record.id, page_slug or self.homepage_slug))
        if page is None or not page.is_published:
            if page_slug and page_slug != self.homepage_slug:
                return None
            return TenantBundle(tenant=record)
        return TenantBundle(tenant=record, blocks=page.blocks, page=page)


class FakeContentRepository:
    def __init__(self, kind, entities=()):
        self.kind = kind
        self.entities = list(entities)
        self.calls = []
        self.fail = False

    async def get_by_slug(self, tenant_id, slug):
        self.calls.append(("get_by_slug", tenant_id, slug))
        for entity in self.entities:
            if entity.tenant_id == tenant_id and entity.slug == slug and entity.is_published:
                return entity
        return None

    async def get_all(self, tenant_id, *, limit=20, offset=0, sort_by="date", sort_order="desc"):
        self.calls.append(("get_all", tenant_id, limit, offset, sort_by, sort_order))
        if self.fail:
            raise StorageError("listing backend down", operation=f"{self.kind.value}.get_all")

        items = [
            e for e in self.entities if e.tenant_id == tenant_id and e.is_published
        ]
        key = (lambda e: e.title) if sort_by == "title" else (lambda e: e.updated_at)
        items.sort(key=key, reverse=sort_order == "desc")
        return items[offset:offset + limit], len(items)


# -------------------------------------------------
# Sample sites
# -------------------------------------------------

@pytest.fixture
def records():
    return [
        _record(
            "acme", "acme",
            navigation={"links": [{"label": "Home", "href": "/"}]},
            footer={"copyright": "© Acme"},
        ),
        _record("globex", "globex", custom_domain="foo.com"),
        _record("foo", "foo"),
        _record("dormant", "dormant", status=TenantStatus.INACTIVE, custom_domain="dormant.com"),
        _record("sketch", "sketch", status=TenantStatus.DRAFT),
        _record("local", "local", custom_domain="localhost:3000"),
    ]


@pytest.fixture
def directory(records):
    return StaticTenantDirectory(
        [r.identity for r in records],
        policy=VisibilityPolicy(draft_visible=True),
        local_dev_domain="localhost:3000",
    )


@pytest.fixture
def tenant_repo(records):
    repo = FakeTenantRepository(records)
    repo.add_page(_entity(
        "acme", ContentKind.PAGE, "home",
        [{"id": "hero-1", "type": "hero", "display_order": 0, "content": {"title": "Welcome"}}],
    ))
    repo.add_page(_entity(
        "acme", ContentKind.PAGE, "about",
        [{"id": "about-text", "type": "rich-text", "display_order": 0, "content": {"content": "Hi"}}],
    ))
    return repo


@pytest.fixture
def content_repos(tenant_repo):
    widget = _entity(
        "acme", ContentKind.PRODUCT, "widget",
        [Block(id="widget-hero", type="product-hero", content={"title": "Widget"}, display_order=0)],
        description="A very good widget",
    )
    return {
        ContentKind.PAGE: FakeContentRepository(ContentKind.PAGE, tenant_repo.pages.values()),
        ContentKind.PRODUCT: FakeContentRepository(ContentKind.PRODUCT, [widget]),
        ContentKind.POST: FakeContentRepository(ContentKind.POST),
    }


@pytest.fixture
def pipeline(directory, tenant_repo, content_repos):
    return SitePipeline(
        directory=directory,
        tenants=tenant_repo,
        contents=content_repos,
    )


@pytest.fixture
def repository_calls(tenant_repo, content_repos):
    """Every call made to any repository, in order of repository."""
    def collect():
        calls = list(tenant_repo.calls)
        for repo in content_repos.values():
            calls.extend(repo.calls)
        return calls
    return collect
