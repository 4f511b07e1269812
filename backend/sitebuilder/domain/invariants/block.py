from typing import Any, Callable, Dict, List, Tuple

# Expected content keys per block type: key -> (expected type, default factory).
# Anything missing or of the wrong type is replaced by its default.
CONTENT_SHAPES: Dict[str, Dict[str, Tuple[type, Callable[[], Any]]]] = {
    "navigation": {
        "logo": (str, lambda: ""),
        "links": (list, list),
        "buttons": (list, list),
        "style": (dict, dict),
    },
    "footer": {
        "copyright": (str, lambda: ""),
        "links": (list, list),
        "socialLinks": (list, list),
        "style": (dict, dict),
    },
    "hero": {
        "title": (str, lambda: ""),
        "subtitle": (str, lambda: ""),
    },
    "rich-text": {
        "content": (str, lambda: ""),
    },
    "faq": {
        "items": (list, list),
    },
    "listing-views": {
        "contentType": (str, lambda: "products"),
        "sortBy": (str, lambda: "date"),
        "sortOrder": (str, lambda: "desc"),
        "itemsToShow": (int, lambda: 6),
        "itemsPerPage": (int, lambda: 12),
        "isPaginated": (bool, lambda: False),
    },
    "product-hero": {
        "title": (str, lambda: ""),
        "subtitle": (str, lambda: ""),
    },
    "product-pricing": {
        "tiers": (list, list),
    },
    "product-features": {
        "features": (list, list),
    },
    "product-gallery": {
        "images": (list, list),
    },
}


def _matches(value, expected: type) -> bool:
    # bool is an int subclass; an int field must not accept True/False
    if expected is int and isinstance(value, bool):
        return False
    return isinstance(value, expected)


def conform_block_content(block_type: str, content) -> Tuple[Dict[str, Any], List[str]]:
    """
    Return (content, malformed_fields) for a block of `block_type`.

    Non-dict content becomes {}. Known keys that are missing or carry the
    wrong type are filled with defaults; only wrong-typed keys are reported,
    since missing optional keys are normal for freshly created blocks.
    Unrecognized keys pass through untouched.
    """
    malformed: List[str] = []

    if not isinstance(content, dict):
        if content is not None:
            malformed.append("content")
        content = {}

    shape = CONTENT_SHAPES.get(block_type)
    if not shape:
        return dict(content), malformed

    conformed = dict(content)
    for key, (expected, default) in shape.items():
        if key not in conformed or conformed[key] is None:
            conformed[key] = default()
        elif not _matches(conformed[key], expected):
            malformed.append(key)
            conformed[key] = default()

    return conformed, malformed
