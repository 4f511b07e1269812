"""Scrub stored block content before it reaches a renderer.

Strings carrying markup go through bleach with a formatting-only allow-list,
which drops script tags, event-handler attributes and unsafe link
protocols. Bare strings that are themselves script or HTML URLs are
blanked. Plain text without markup is returned as stored.
"""

import bleach

ALLOWED_TAGS = [
    "p", "br", "hr", "h1", "h2", "h3", "h4", "h5", "h6",
    "strong", "em", "b", "i", "u", "s", "a", "img", "span", "div",
    "ul", "ol", "li", "blockquote", "code", "pre",
    "table", "thead", "tbody", "tr", "th", "td",
]

ALLOWED_ATTRIBUTES = {
    "*": ["class"],
    "a": ["href", "title", "rel", "target"],
    "img": ["src", "alt", "title", "width", "height"],
    "th": ["colspan", "rowspan"],
    "td": ["colspan", "rowspan"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto", "tel"]

UNSAFE_URL_PREFIXES = ("javascript:", "vbscript:", "data:text/html")


def _is_unsafe_url(value: str) -> bool:
    # browsers ignore whitespace and case inside the scheme
    compact = "".join(value.split()).lower()
    return compact.startswith(UNSAFE_URL_PREFIXES)


def sanitize_string(value: str) -> str:
    if _is_unsafe_url(value):
        return ""
    if "<" not in value:
        return value
    return bleach.clean(
        value,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )


def sanitize_content(content):
    """Recursively sanitize every string inside dicts and lists."""
    if isinstance(content, str):
        return sanitize_string(content)
    if isinstance(content, (list, tuple)):
        return [sanitize_content(item) for item in content]
    if isinstance(content, dict):
        return {key: sanitize_content(value) for key, value in content.items()}
    return content
