import math
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sitebuilder.domain.blocks import Block, BlockType
from .sanitize import sanitize_content

_Entry = Tuple[str, str, Any, Optional[float]]


def _coerce_order(value) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _type_of(value) -> str:
    return value if isinstance(value, str) else ""


def _iter_list(items, owner_id) -> Iterator[_Entry]:
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        block_id = item.get("id") or (f"block-{index}-{owner_id}" if owner_id else f"block-{index}")
        yield (
            str(block_id),
            _type_of(item.get("type")),
            item.get("content"),
            _coerce_order(item.get("display_order")),
        )


def _is_type_keyed(key, value) -> bool:
    """
    A registered block type as key means the value is that block's content,
    even when the content carries its own `type` field. Anything else with a
    `type` is an id-keyed entry.
    """
    if BlockType.parse(key) is not None and not isinstance(value.get("content"), dict):
        return True
    return "type" not in value


def _iter_mapping(mapping, owner_id) -> Iterator[_Entry]:
    for key, value in mapping.items():
        if not isinstance(value, dict):
            continue

        if _is_type_keyed(key, value):
            # keyed by block type: {type: {display_order, ...content}}
            content = {k: v for k, v in value.items() if k != "display_order"}
            yield (
                f"{key}-{owner_id}" if owner_id else str(key),
                str(key),
                content,
                _coerce_order(value.get("display_order")),
            )
        else:
            # keyed by block id: {id: {type, content, display_order}}
            yield (
                str(key),
                _type_of(value.get("type")),
                value.get("content"),
                _coerce_order(value.get("display_order")),
            )


def normalize_blocks(raw, owner_id: Optional[str] = None) -> List[Block]:
    """
    Canonicalize any stored block collection into an ordered list of Blocks.

    Accepted shapes:
    - flat list of block dicts
    - mapping keyed by block id ({id: {type, content, display_order}})
    - mapping keyed by block type ({type: {display_order, ...content}})

    Ordering:
    - explicit display_order values are kept
    - when no entry carries one, position in the collection is the order
    - entries without one in a mixed collection go after every explicit one,
      in insertion order

    Every string in block content is sanitized (see normalizers.sanitize).
    Never raises on bad data; unusable entries are skipped.
    """
    if isinstance(raw, (list, tuple)):
        entries = list(_iter_list(raw, owner_id))
    elif isinstance(raw, dict):
        entries = list(_iter_mapping(raw, owner_id))
    else:
        return []

    explicit = [order for *_, order in entries if order is not None]
    fallback = (max(explicit) + 1) if explicit else None

    blocks = []
    for position, (block_id, block_type, content, order) in enumerate(entries):
        if order is None:
            order = position if fallback is None else fallback
        blocks.append(
            Block(
                id=block_id,
                type=block_type,
                content=sanitize_content(content),
                display_order=order,
            )
        )

    # stable: equal orders keep insertion order
    blocks.sort(key=lambda b: b.display_order)
    return blocks


def normalize_block(block: Block, admin=False) -> Dict[str, Any]:
    base = {
        "id": block.id,
        "type": block.type,
        "content": block.content if isinstance(block.content, dict) else {},
        "display_order": None if block.has_sentinel_order else block.display_order,
    }

    if admin:
        base["source"] = block.source

    return base
