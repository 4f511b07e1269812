from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .blocks import Block


class ContentKind(str, Enum):
    PAGE = "page"
    PRODUCT = "product"
    POST = "post"


@dataclass
class ContentEntity:
    """A page, product or post owned by exactly one tenant."""

    id: str
    tenant_id: str
    kind: ContentKind
    slug: str
    title: str
    is_published: bool = True
    blocks: List[Block] = field(default_factory=list)
    description: Optional[str] = None
    featured_image: Optional[str] = None
    updated_at: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict)
