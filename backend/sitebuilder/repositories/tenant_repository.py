from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from sitebuilder.domain.blocks import FOOTER_ORDER, NAVIGATION_ORDER, Block, BlockType
from sitebuilder.domain.content import ContentKind
from sitebuilder.domain.exceptions import StorageError
from sitebuilder.domain.lifecycle.tenant import VisibilityPolicy
from sitebuilder.domain.tenant import SharedBlocks, TenantIdentity, TenantRecord, TenantStatus
from sitebuilder.extensions import db
from sitebuilder.models.block import SiteBlock
from sitebuilder.models.page import Page
from sitebuilder.models.tenant import Tenant
from sitebuilder.normalizers.block import normalize_blocks
from sitebuilder.normalizers.sanitize import sanitize_content
from .base import TenantBundle
from .content_repository import to_entity

logger = structlog.get_logger(__name__)

SHARED_ORDERS = {
    BlockType.NAVIGATION.value: NAVIGATION_ORDER,
    BlockType.FOOTER.value: FOOTER_ORDER,
}


def _shared_block(tenant: Tenant, block_type: str, legacy_rows) -> Optional[Block]:
    """Shared chrome comes from settings; legacy site blocks are the fallback."""
    content = (tenant.settings or {}).get(block_type)
    if isinstance(content, dict) and content:
        return Block(
            id=f"site-{block_type}",
            type=block_type,
            content=sanitize_content(content),
            display_order=SHARED_ORDERS[block_type],
            source="shared",
        )

    for row in legacy_rows:
        if row.block_type == block_type:
            return Block(
                id=row.id,
                type=block_type,
                content=sanitize_content(row.content),
                display_order=SHARED_ORDERS[block_type],
                source="shared",
            )
    return None


def to_record(tenant: Tenant, legacy_rows=()) -> TenantRecord:
    settings = tenant.settings if isinstance(tenant.settings, dict) else {}
    return TenantRecord(
        id=tenant.id,
        name=tenant.name,
        subdomain=tenant.subdomain,
        custom_domain=tenant.custom_domain,
        status=TenantStatus(tenant.status),
        settings=settings,
        theme=tenant.theme.to_dict() if tenant.theme else None,
        shared=SharedBlocks(
            navigation=_shared_block(tenant, BlockType.NAVIGATION.value, legacy_rows),
            footer=_shared_block(tenant, BlockType.FOOTER.value, legacy_rows),
        ),
        updated_at=tenant.updated_at,
    )


class SqlTenantRepository:
    def __init__(self, *, policy: VisibilityPolicy, homepage_slug: str = "home"):
        self.policy = policy
        self.homepage_slug = homepage_slug

    def _homepage(self, tenant_id: str) -> Optional[Page]:
        published = Page.query.filter_by(tenant_id=tenant_id, is_published=True)
        return (
            published.filter_by(is_homepage=True).first()
            or published.filter_by(slug=self.homepage_slug).first()
        )

    async def get_identity(self, tenant_id: str) -> Optional[TenantIdentity]:
        try:
            tenant = db.session.get(Tenant, tenant_id)
        except SQLAlchemyError as exc:
            logger.error("storage_error", operation="tenant.get_identity", error=str(exc))
            raise StorageError("Failed to load tenant", operation="tenant.get_identity") from exc
        return tenant.to_identity() if tenant else None

    async def load(
        self,
        identity: TenantIdentity,
        page_slug: Optional[str] = None,
        *,
        with_blocks: bool = True,
        enforce_visibility: bool = True,
    ) -> Optional[TenantBundle]:
        """
        Load the tenant record and, optionally, one page's blocks.

        page_slug short-circuits straight to that page; without it the
        homepage is used, and tenants with no homepage fall back to their
        legacy site-level blocks. A missing non-home page is not found.
        """
        try:
            tenant = db.session.get(Tenant, identity.id)
            if tenant is None:
                return None

            if enforce_visibility and not self.policy.is_visible(tenant.status):
                logger.info("site_not_visible", tenant_id=tenant.id, status=tenant.status)
                return None

            legacy_rows = [
                row for row in tenant.site_blocks if row.is_active
            ]
            record = to_record(tenant, legacy_rows)

            if not with_blocks:
                return TenantBundle(tenant=record)

            if page_slug and page_slug != self.homepage_slug:
                page = (
                    Page.query
                    .filter_by(tenant_id=tenant.id, slug=page_slug, is_published=True)
                    .first()
                )
                if page is None:
                    return None
            else:
                page = self._homepage(tenant.id)

        except SQLAlchemyError as exc:
            logger.error("storage_error", operation="tenant.load", error=str(exc))
            raise StorageError("Failed to load site", operation="tenant.load") from exc

        if page is not None:
            entity = to_entity(page, ContentKind.PAGE)
            return TenantBundle(tenant=record, blocks=entity.blocks, page=entity)

        blocks = normalize_blocks([row.to_raw() for row in legacy_rows], owner_id=tenant.id)
        return TenantBundle(tenant=record, blocks=blocks)
