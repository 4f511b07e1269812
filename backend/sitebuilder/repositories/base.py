from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

from sitebuilder.domain.blocks import Block
from sitebuilder.domain.content import ContentEntity, ContentKind
from sitebuilder.domain.tenant import TenantIdentity, TenantRecord


@dataclass
class TenantBundle:
    tenant: TenantRecord
    blocks: List[Block] = field(default_factory=list)
    page: Optional[ContentEntity] = None


class TenantRepository(Protocol):
    async def load(
        self,
        identity: TenantIdentity,
        page_slug: Optional[str] = None,
        *,
        with_blocks: bool = True,
        enforce_visibility: bool = True,
    ) -> Optional[TenantBundle]:
        ...

    async def get_identity(self, tenant_id: str) -> Optional[TenantIdentity]:
        ...


class ContentRepository(Protocol):
    kind: ContentKind

    async def get_by_slug(self, tenant_id: str, slug: str) -> Optional[ContentEntity]:
        ...

    async def get_all(
        self,
        tenant_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
        sort_by: str = "date",
        sort_order: str = "desc",
    ) -> Tuple[List[ContentEntity], int]:
        ...
