# sitebuilder/application/site/resolve_path.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union

import structlog

from sitebuilder.domain.content import ContentEntity, ContentKind
from sitebuilder.domain.tenant import TenantRecord

logger = structlog.get_logger(__name__)

# url_prefixes settings key -> kind
PREFIX_SETTINGS_KEYS = {
    "pages": ContentKind.PAGE,
    "products": ContentKind.PRODUCT,
    "posts": ContentKind.POST,
}

DEFAULT_URL_PREFIXES = {key: key for key in PREFIX_SETTINGS_KEYS}

# Bare paths are looked up in this order.
LOOKUP_ORDER = (ContentKind.PAGE, ContentKind.POST, ContentKind.PRODUCT)


def _is_unsafe(segment: str) -> bool:
    return ".." in segment or "/" in segment or "\\" in segment


def sanitize_site_segment(value: Optional[str]) -> Optional[str]:
    """
    Validate the tenant-identifying path segment.

    Anything unsafe rejects the whole request; there is no partial repair.
    """
    if value is None:
        return None
    value = value.strip()
    if not value or _is_unsafe(value):
        return None
    return value


def sanitize_segments(path: Union[str, Iterable[str], None]) -> Optional[List[str]]:
    """
    Split and validate a requested slug path.

    Returns the cleaned segments, [] for the root, or None when any segment
    contains `..` or a separator, in which case the lookup must stop as
    not found. Empty and whitespace-only segments are dropped.
    """
    if path is None:
        return []
    if isinstance(path, str):
        segments = path.split("/")
    else:
        segments = list(path)

    cleaned = []
    for segment in segments:
        if not isinstance(segment, str):
            return None
        if _is_unsafe(segment):
            return None
        segment = segment.strip()
        if segment:
            cleaned.append(segment)
    return cleaned


def url_prefixes(tenant: TenantRecord) -> Dict[str, ContentKind]:
    """Effective prefix -> kind table: defaults overridden by tenant settings."""
    configured = tenant.url_prefixes
    table = {}
    for key, kind in PREFIX_SETTINGS_KEYS.items():
        prefix = configured.get(key) or DEFAULT_URL_PREFIXES[key]
        table[prefix.strip("/")] = kind
    return table


@dataclass
class PathMatch:
    kind: ContentKind
    entity: ContentEntity


async def resolve_content_path(
    tenant: TenantRecord,
    segments: List[str],
    repositories: Mapping[ContentKind, object],
) -> Optional[PathMatch]:
    """
    Two-tier lookup of a catch-all path.

    1. `<prefix>/<slug...>` with a known prefix looks up that kind for the rest.
    2. Otherwise, or on a miss, the full path is tried page -> post ->
       product, skipping kinds the tenant moved under a custom prefix.
    """
    if not segments:
        return None

    prefixes = url_prefixes(tenant)

    if len(segments) >= 2 and segments[0] in prefixes:
        kind = prefixes[segments[0]]
        entity = await repositories[kind].get_by_slug(tenant.id, "/".join(segments[1:]))
        if entity is not None:
            return PathMatch(kind=kind, entity=entity)

    customized = {
        PREFIX_SETTINGS_KEYS[key]
        for key, prefix in tenant.url_prefixes.items()
        if key in PREFIX_SETTINGS_KEYS and prefix.strip("/") != DEFAULT_URL_PREFIXES[key]
    }
    slug = "/".join(segments)
    for kind in LOOKUP_ORDER:
        if kind is not ContentKind.PAGE and kind in customized:
            continue
        entity = await repositories[kind].get_by_slug(tenant.id, slug)
        if entity is not None:
            return PathMatch(kind=kind, entity=entity)

    logger.info("content_not_found", tenant_id=tenant.id, path=slug)
    return None
