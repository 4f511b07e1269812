# sitebuilder/application/site/render_site.py
from __future__ import annotations

import asyncio
from typing import Dict, List, Mapping, Optional

import structlog

from sitebuilder.domain.blocks import BlockType
from sitebuilder.domain.content import ContentEntity, ContentKind
from sitebuilder.domain.exceptions import StorageError
from sitebuilder.domain.lifecycle.tenant import VisibilityPolicy
from sitebuilder.domain.page import ResolvedPage
from sitebuilder.domain.tenant import TenantIdentity, TenantRecord
from sitebuilder.normalizers.content import normalize_entity_summary
from sitebuilder.repositories.base import ContentRepository, TenantRepository
from .compose_blocks import DiagnosticHook, compose_blocks
from .resolve_path import resolve_content_path, sanitize_segments, sanitize_site_segment
from .tenant_directory import SqlTenantDirectory, StaticTenantDirectory, TenantDirectory

logger = structlog.get_logger(__name__)

LISTING_KINDS = {
    "products": ContentKind.PRODUCT,
    "posts": ContentKind.POST,
    "pages": ContentKind.PAGE,
}


class SitePipeline:
    """
    Request entry into the resolution core.

    Every entry point (Host header, explicit subdomain, explicit kind)
    sanitizes first, resolves a TenantIdentity, then shares one loading and
    composition path. All methods return None for "not found"; StorageError
    propagates untouched.
    """

    def __init__(
        self,
        *,
        directory: TenantDirectory,
        tenants: TenantRepository,
        contents: Mapping[ContentKind, ContentRepository],
        on_diagnostic: Optional[DiagnosticHook] = None,
    ):
        self.directory = directory
        self.tenants = tenants
        self.contents = contents
        self.on_diagnostic = on_diagnostic

    # -------------------------------------------------
    # Entry points
    # -------------------------------------------------

    async def render_host(self, host: Optional[str], path=None) -> Optional[ResolvedPage]:
        segments = sanitize_segments(path)
        if segments is None:
            logger.info("path_rejected", host=host, path=path)
            return None

        identity = self.directory.resolve(host)
        if identity is None:
            logger.info("site_not_found", host=host)
            return None

        return await self._render(identity, segments)

    async def render_subdomain(self, subdomain: Optional[str], path=None) -> Optional[ResolvedPage]:
        subdomain = sanitize_site_segment(subdomain)
        segments = sanitize_segments(path)
        if subdomain is None or segments is None:
            logger.info("path_rejected", subdomain=subdomain, path=path)
            return None

        identity = self.directory.resolve_subdomain(subdomain)
        if identity is None:
            logger.info("site_not_found", subdomain=subdomain)
            return None

        return await self._render(identity, segments)

    async def render_kind(
        self, host: Optional[str], kind: ContentKind, slug: Optional[str]
    ) -> Optional[ResolvedPage]:
        segments = sanitize_segments(slug)
        if not segments:
            logger.info("path_rejected", host=host, path=slug)
            return None

        identity = self.directory.resolve(host)
        if identity is None:
            logger.info("site_not_found", host=host)
            return None

        return await self._render_entity(identity, ContentKind(kind), "/".join(segments))

    async def render_identity(
        self, identity: TenantIdentity, path=None, *, enforce_visibility: bool = True
    ) -> Optional[ResolvedPage]:
        segments = sanitize_segments(path)
        if segments is None:
            return None
        return await self._render(identity, segments, enforce_visibility=enforce_visibility)

    # -------------------------------------------------
    # Shared core
    # -------------------------------------------------

    async def _render(self, identity, segments: List[str], *, enforce_visibility=True):
        if not segments:
            bundle = await self.tenants.load(identity, enforce_visibility=enforce_visibility)
            if bundle is None:
                return None
            return await self._finish(bundle.tenant, bundle.blocks, ContentKind.PAGE, bundle.page)

        # url prefixes live in tenant settings, so the tenant comes first here
        bundle = await self.tenants.load(
            identity, with_blocks=False, enforce_visibility=enforce_visibility
        )
        if bundle is None:
            return None

        match = await resolve_content_path(bundle.tenant, segments, self.contents)
        if match is None:
            return None
        return await self._finish(bundle.tenant, match.entity.blocks, match.kind, match.entity)

    async def _render_entity(self, identity, kind: ContentKind, slug: str, *, enforce_visibility=True):
        if kind is ContentKind.PAGE:
            bundle = await self.tenants.load(
                identity, page_slug=slug, enforce_visibility=enforce_visibility
            )
            if bundle is None:
                return None
            return await self._finish(bundle.tenant, bundle.blocks, kind, bundle.page)

        bundle, entity = await asyncio.gather(
            self.tenants.load(identity, with_blocks=False, enforce_visibility=enforce_visibility),
            self.contents[kind].get_by_slug(identity.id, slug),
        )
        if bundle is None or entity is None:
            return None
        return await self._finish(bundle.tenant, entity.blocks, kind, entity)

    async def _finish(
        self,
        tenant: TenantRecord,
        blocks,
        kind: ContentKind,
        entity: Optional[ContentEntity],
    ) -> ResolvedPage:
        page = compose_blocks(
            tenant, blocks, kind=kind, entity=entity, on_diagnostic=self.on_diagnostic
        )
        page.listing_data = await self._prefetch_listings(page)
        return page

    # -------------------------------------------------
    # Listing-views prefetch
    # -------------------------------------------------

    async def _prefetch_listings(self, page: ResolvedPage) -> Dict[str, dict]:
        listing_blocks = [
            b for b in page.body if b.type == BlockType.LISTING_VIEWS.value
        ]
        if not listing_blocks:
            return {}

        results = await asyncio.gather(
            *(self._prefetch_listing(page.tenant.id, block) for block in listing_blocks)
        )
        return {block_id: data for block_id, data in results if data is not None}

    async def _prefetch_listing(self, tenant_id: str, block):
        content = block.content
        kind = LISTING_KINDS.get(content.get("contentType"), ContentKind.PRODUCT)
        limit = content["itemsPerPage"] if content.get("isPaginated") else content["itemsToShow"]

        try:
            items, total = await self.contents[kind].get_all(
                tenant_id,
                limit=limit,
                offset=0,
                sort_by=content.get("sortBy", "date"),
                sort_order=content.get("sortOrder", "desc"),
            )
        except StorageError as exc:
            # the renderer loads this block client-side instead
            logger.warning(
                "listing_prefetch_failed", tenant_id=tenant_id, block_id=block.id, error=str(exc)
            )
            return block.id, None

        return block.id, {
            "content_type": kind.value,
            "items": [normalize_entity_summary(item) for item in items],
            "total": total,
        }


def build_site_pipeline(config) -> SitePipeline:
    from sitebuilder.repositories.content_repository import build_content_repositories
    from sitebuilder.repositories.tenant_repository import SqlTenantRepository

    policy = VisibilityPolicy.from_config(config)
    directory_kwargs = {
        "policy": policy,
        "local_dev_domain": config.get("LOCAL_DEV_DOMAIN", "localhost:3000"),
    }

    mappings_file = config.get("SITE_MAPPINGS_FILE")
    if mappings_file:
        directory = StaticTenantDirectory.from_file(mappings_file, **directory_kwargs)
    else:
        directory = SqlTenantDirectory(**directory_kwargs)

    homepage_slug = config.get("HOMEPAGE_SLUG", "home")
    return SitePipeline(
        directory=directory,
        tenants=SqlTenantRepository(policy=policy, homepage_slug=homepage_slug),
        contents=build_content_repositories(),
    )


def get_site_pipeline() -> SitePipeline:
    """The pipeline built for the current app in create_app."""
    from flask import current_app

    return current_app.extensions["site_pipeline"]
