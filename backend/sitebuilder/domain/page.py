from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .blocks import Block
from .content import ContentEntity, ContentKind
from .tenant import TenantRecord

UNKNOWN_BLOCK_TYPE = "unknown_block_type"
MALFORMED_BLOCK = "malformed_block"
DUPLICATE_SHARED_BLOCK = "duplicate_shared_block"
FALLBACK_SYNTHESIZED = "fallback_synthesized"


@dataclass(frozen=True)
class Diagnostic:
    """Author-facing note about data the composer had to repair or drop."""

    code: str
    block_id: Optional[str] = None
    block_type: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "block_id": self.block_id,
            "block_type": self.block_type,
            "detail": dict(self.detail),
        }


@dataclass
class ResolvedPage:
    """
    Composer output: ordered blocks with navigation and footer addressable
    on their own, plus the owning tenant for cross-cutting context.
    """

    tenant: TenantRecord
    kind: ContentKind
    entity: Optional[ContentEntity] = None
    navigation: Optional[Block] = None
    body: List[Block] = field(default_factory=list)
    footer: Optional[Block] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    listing_data: Dict[str, Any] = field(default_factory=dict)

    @property
    def blocks(self) -> List[Block]:
        ordered = []
        if self.navigation is not None:
            ordered.append(self.navigation)
        ordered.extend(self.body)
        if self.footer is not None:
            ordered.append(self.footer)
        return ordered

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    @property
    def last_modified(self) -> Optional[datetime]:
        stamps = [self.tenant.updated_at]
        if self.entity is not None:
            stamps.append(self.entity.updated_at)
        stamps = [
            s if s.tzinfo else s.replace(tzinfo=timezone.utc)
            for s in stamps
            if s is not None
        ]
        return max(stamps) if stamps else None

    def diagnostics_of(self, code: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]
