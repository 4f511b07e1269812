"""SQLAlchemy-backed content repositories: one instance per content kind.

Unpublished rows are never returned; to a public caller they do not exist.
Stored block collections are canonicalized here, so nothing above this layer
ever sees a keyed mapping.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import structlog
from sqlalchemy.exc import SQLAlchemyError

from sitebuilder.domain.content import ContentEntity, ContentKind
from sitebuilder.domain.exceptions import StorageError
from sitebuilder.models.page import Page, Post, Product
from sitebuilder.normalizers.block import normalize_blocks

logger = structlog.get_logger(__name__)

MODELS_BY_KIND = {
    ContentKind.PAGE: Page,
    ContentKind.PRODUCT: Product,
    ContentKind.POST: Post,
}

SORTABLE_FIELDS = {"date": "created_at", "title": "title"}


def to_entity(row, kind: ContentKind) -> ContentEntity:
    """Convert a Page/Product/Post row to a ContentEntity."""
    extra = {}
    if kind is ContentKind.PAGE:
        description = None
        featured_image = None
        extra["is_homepage"] = bool(row.is_homepage)
        extra["seo"] = row.seo or {}
    elif kind is ContentKind.PRODUCT:
        description = row.description
        featured_image = row.featured_image
    else:
        description = row.excerpt
        featured_image = row.featured_image
        if row.published_at is not None:
            extra["published_at"] = row.published_at.isoformat()

    return ContentEntity(
        id=row.id,
        tenant_id=row.tenant_id,
        kind=kind,
        slug=row.slug,
        title=row.title,
        is_published=bool(row.is_published),
        blocks=normalize_blocks(row.content_blocks, owner_id=row.id),
        description=description,
        featured_image=featured_image,
        updated_at=row.updated_at,
        extra=extra,
    )


class SqlContentRepository:
    def __init__(self, kind: ContentKind):
        self.kind = ContentKind(kind)
        self.model = MODELS_BY_KIND[self.kind]

    def _published(self, tenant_id: str):
        return self.model.query.filter_by(tenant_id=tenant_id, is_published=True)

    async def get_by_slug(self, tenant_id: str, slug: str) -> Optional[ContentEntity]:
        if not tenant_id or not slug:
            return None

        try:
            row = self._published(tenant_id).filter_by(slug=slug).first()
        except SQLAlchemyError as exc:
            logger.error("storage_error", operation=f"{self.kind.value}.get_by_slug", error=str(exc))
            raise StorageError(
                f"Failed to load {self.kind.value}", operation=f"{self.kind.value}.get_by_slug"
            ) from exc

        return to_entity(row, self.kind) if row else None

    async def get_all(
        self,
        tenant_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
        sort_by: str = "date",
        sort_order: str = "desc",
    ) -> Tuple[List[ContentEntity], int]:
        column = getattr(self.model, SORTABLE_FIELDS.get(sort_by, "created_at"))
        ordering = column.asc() if sort_order == "asc" else column.desc()

        try:
            query = self._published(tenant_id)
            total = query.count()
            rows = (
                query.order_by(ordering, self.model.id.asc())
                .offset(max(offset, 0))
                .limit(max(limit, 0))
                .all()
            )
        except SQLAlchemyError as exc:
            logger.error("storage_error", operation=f"{self.kind.value}.get_all", error=str(exc))
            raise StorageError(
                f"Failed to list {self.kind.value}s", operation=f"{self.kind.value}.get_all"
            ) from exc

        return [to_entity(row, self.kind) for row in rows], total


def build_content_repositories():
    return {kind: SqlContentRepository(kind) for kind in ContentKind}
