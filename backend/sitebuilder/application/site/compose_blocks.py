# sitebuilder/application/site/compose_blocks.py
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, List, Optional

import structlog

from sitebuilder.domain.blocks import (
    FOOTER_ORDER,
    NAVIGATION_ORDER,
    Block,
    BlockType,
    is_renderable,
)
from sitebuilder.domain.content import ContentEntity, ContentKind
from sitebuilder.domain.invariants.block import conform_block_content
from sitebuilder.domain.page import (
    DUPLICATE_SHARED_BLOCK,
    FALLBACK_SYNTHESIZED,
    MALFORMED_BLOCK,
    UNKNOWN_BLOCK_TYPE,
    Diagnostic,
    ResolvedPage,
)
from sitebuilder.domain.tenant import TenantRecord
from sitebuilder.normalizers.block import normalize_blocks
from sitebuilder.normalizers.sanitize import sanitize_content

logger = structlog.get_logger(__name__)

DiagnosticHook = Callable[[Diagnostic], None]

# Kinds that never render blank: an empty body gets a hero built from the entity.
FALLBACK_BLOCK_TYPES = {
    ContentKind.PRODUCT: BlockType.PRODUCT_HERO.value,
    ContentKind.POST: BlockType.HERO.value,
}


def _as_raw(block: Block) -> dict:
    return {
        "id": block.id,
        "type": block.type,
        "content": block.content,
        "display_order": block.display_order,
    }


def _as_blocks(entity_blocks, owner_id: Optional[str]) -> List[Block]:
    if entity_blocks is None:
        return []
    if isinstance(entity_blocks, (list, tuple)):
        if all(isinstance(b, Block) for b in entity_blocks):
            return list(entity_blocks)
        # mixed input: Block items go through the same canonicalization
        entity_blocks = [_as_raw(b) if isinstance(b, Block) else b for b in entity_blocks]
    return normalize_blocks(entity_blocks, owner_id=owner_id)


def _synthesize_fallback(entity: ContentEntity) -> Block:
    return Block(
        id=f"fallback-{entity.id}",
        type=FALLBACK_BLOCK_TYPES[entity.kind],
        content={
            "title": entity.title or "",
            "subtitle": entity.description or "",
            "image": entity.featured_image or "",
        },
        display_order=0,
        source="synthesized",
    )


class _Recorder:
    def __init__(self, tenant_id: str, hook: Optional[DiagnosticHook]):
        self.tenant_id = tenant_id
        self.hook = hook
        self.items: List[Diagnostic] = []

    def record(self, code: str, block: Optional[Block] = None, **detail) -> None:
        diagnostic = Diagnostic(
            code=code,
            block_id=block.id if block else None,
            block_type=block.type if block else None,
            detail=detail,
        )
        self.items.append(diagnostic)

        log = logger.warning if code == MALFORMED_BLOCK else logger.info
        log(
            code,
            tenant_id=self.tenant_id,
            block_id=diagnostic.block_id,
            block_type=diagnostic.block_type,
            **detail,
        )

        if self.hook is not None:
            self.hook(diagnostic)


def _dedupe_shared(blocks: Iterable[Block], recorder: _Recorder) -> List[Block]:
    """Keep the first embedded navigation/footer; later copies are dropped."""
    seen = set()
    kept = []
    for block in blocks:
        if block.is_shared_type:
            if block.type in seen:
                recorder.record(DUPLICATE_SHARED_BLOCK, block, reason="embedded_twice")
                continue
            seen.add(block.type)
        kept.append(block)
    return kept


def compose_blocks(
    tenant: TenantRecord,
    entity_blocks=None,
    *,
    kind: ContentKind = ContentKind.PAGE,
    entity: Optional[ContentEntity] = None,
    on_diagnostic: Optional[DiagnosticHook] = None,
) -> ResolvedPage:
    """
    Merge an entity's blocks with the tenant's shared chrome into one
    deterministically ordered, de-duplicated, render-ready sequence.

    - entity-embedded navigation/footer win over the tenant-shared ones
    - injected navigation sorts first and footer last, whatever other
      blocks declare
    - ties in display_order keep input order
    - types outside the kind's allow-list are dropped (diagnostic)
    - malformed content is repaired to per-type defaults (diagnostic)
    - empty product/post bodies get a synthesized hero

    Never raises for data-shape problems. A missing tenant is a caller bug.
    """
    if tenant is None:
        raise ValueError("Tenant cannot be None")

    kind = ContentKind(kind)
    recorder = _Recorder(tenant.id, on_diagnostic)

    owner_id = entity.id if entity is not None else tenant.id
    blocks = _as_blocks(entity_blocks, owner_id)
    blocks.sort(key=lambda b: b.display_order)
    blocks = _dedupe_shared(blocks, recorder)

    embedded_types = {b.type for b in blocks if b.is_shared_type}

    navigation = tenant.shared.navigation
    if navigation is not None and BlockType.NAVIGATION.value not in embedded_types:
        blocks.insert(
            0, replace(navigation, display_order=NAVIGATION_ORDER, source="shared")
        )

    footer = tenant.shared.footer
    if footer is not None and BlockType.FOOTER.value not in embedded_types:
        blocks.append(replace(footer, display_order=FOOTER_ORDER, source="shared"))

    blocks.sort(key=lambda b: b.display_order)

    rendered: List[Block] = []
    for block in blocks:
        if not is_renderable(block.type, kind.value):
            recorder.record(UNKNOWN_BLOCK_TYPE, block, kind=kind.value)
            continue

        content, malformed = conform_block_content(block.type, sanitize_content(block.content))
        if malformed:
            recorder.record(MALFORMED_BLOCK, block, fields=malformed)
        rendered.append(replace(block, content=content))

    page = ResolvedPage(tenant=tenant, kind=kind, entity=entity)
    for block in rendered:
        if block.type == BlockType.NAVIGATION.value:
            page.navigation = block
        elif block.type == BlockType.FOOTER.value:
            page.footer = block
        else:
            page.body.append(block)

    if not page.body and entity is not None and kind in FALLBACK_BLOCK_TYPES:
        fallback = _synthesize_fallback(entity)
        recorder.record(FALLBACK_SYNTHESIZED, fallback, entity_id=entity.id)
        page.body.append(fallback)

    page.diagnostics = recorder.items
    return page
