# sitebuilder/utils/pagination.py
from typing import Tuple

from flask import request
from werkzeug.exceptions import BadRequest

DEFAULT_PER_PAGE = 12
MAX_PER_PAGE = 100


def _positive_int(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise BadRequest(f"{name} must be an integer") from exc
    if value < 1:
        raise BadRequest(f"{name} must be positive")
    return value


def parse_page_args() -> Tuple[int, int]:
    """
    Read ?page=&per_page= from the request.

    Returns (page, per_page); per_page is capped at MAX_PER_PAGE.
    """
    page = _positive_int("page", 1)
    per_page = min(_positive_int("per_page", DEFAULT_PER_PAGE), MAX_PER_PAGE)
    return page, per_page


def parse_sort_args() -> Tuple[str, str]:
    sort_by = request.args.get("sort_by", "date")
    sort_order = request.args.get("sort_order", "desc")

    if sort_by not in ("date", "title"):
        raise BadRequest("sort_by must be 'date' or 'title'")
    if sort_order not in ("asc", "desc"):
        raise BadRequest("sort_order must be 'asc' or 'desc'")
    return sort_by, sort_order
