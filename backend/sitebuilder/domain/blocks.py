from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet

# Bump when a block kind is added or removed from the registry.
BLOCK_SCHEMA_VERSION = 1

# Sentinel orders for tenant-shared chrome.
NAVIGATION_ORDER = -math.inf
FOOTER_ORDER = math.inf


class BlockType(str, Enum):
    NAVIGATION = "navigation"
    FOOTER = "footer"
    HERO = "hero"
    RICH_TEXT = "rich-text"
    FAQ = "faq"
    DIVIDER = "divider"
    IMAGE_TEXT = "image-text"
    LISTING_VIEWS = "listing-views"
    PRODUCT_DEFAULT = "product-default"
    PRODUCT_HERO = "product-hero"
    PRODUCT_DETAILS = "product-details"
    PRODUCT_GALLERY = "product-gallery"
    PRODUCT_FEATURES = "product-features"
    PRODUCT_HOTSPOT = "product-hotspot"
    PRODUCT_PRICING = "product-pricing"
    IMAGE = "image"
    CODE = "code"
    QUOTE = "quote"

    @classmethod
    def parse(cls, value):
        """Return the BlockType for `value`, or None when it is not registered."""
        try:
            return cls(value)
        except ValueError:
            return None


SHARED_BLOCK_TYPES: FrozenSet[str] = frozenset(
    {BlockType.NAVIGATION.value, BlockType.FOOTER.value}
)

# Render-capable types per content kind. Shared chrome renders everywhere.
RENDERABLE_BLOCK_TYPES: Dict[str, FrozenSet[str]] = {
    "page": SHARED_BLOCK_TYPES | {
        "hero", "rich-text", "faq", "divider", "image-text", "listing-views",
    },
    "product": SHARED_BLOCK_TYPES | {
        "product-default", "product-hero", "product-details", "product-gallery",
        "product-features", "product-hotspot", "product-pricing", "faq",
        "listing-views",
    },
    "post": SHARED_BLOCK_TYPES | {
        "hero", "rich-text", "image", "code", "quote", "divider",
    },
}


def is_renderable(block_type: str, kind: str) -> bool:
    if BlockType.parse(block_type) is None:
        return False
    return block_type in RENDERABLE_BLOCK_TYPES.get(kind, frozenset())


@dataclass
class Block:
    id: str
    type: str
    content: Dict[str, Any] = field(default_factory=dict)
    display_order: float = 0
    # entity | shared | synthesized
    source: str = "entity"

    @property
    def is_shared_type(self) -> bool:
        return self.type in SHARED_BLOCK_TYPES

    @property
    def has_sentinel_order(self) -> bool:
        return math.isinf(self.display_order)
