from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .blocks import Block


class TenantStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class TenantIdentity:
    """Routing-only view of a tenant: enough to find it, nothing more."""

    id: str
    subdomain: str
    custom_domain: Optional[str]
    status: TenantStatus


@dataclass
class SharedBlocks:
    navigation: Optional[Block] = None
    footer: Optional[Block] = None


@dataclass
class TenantRecord:
    id: str
    name: str
    subdomain: str
    custom_domain: Optional[str]
    status: TenantStatus
    settings: Dict[str, Any] = field(default_factory=dict)
    theme: Optional[Dict[str, Any]] = None
    shared: SharedBlocks = field(default_factory=SharedBlocks)
    updated_at: Optional[datetime] = None

    @property
    def identity(self) -> TenantIdentity:
        return TenantIdentity(
            id=self.id,
            subdomain=self.subdomain,
            custom_domain=self.custom_domain,
            status=self.status,
        )

    @property
    def url_prefixes(self) -> Dict[str, str]:
        prefixes = self.settings.get("url_prefixes")
        if not isinstance(prefixes, dict):
            return {}
        return {k: v for k, v in prefixes.items() if isinstance(v, str) and v}
