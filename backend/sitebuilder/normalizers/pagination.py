# sitebuilder/normalizers/pagination.py
from typing import Any, Callable, Dict, List


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    page: int,
    per_page: int,
    total: int,
) -> Dict[str, Any]:
    """
    Normalize an offset-paginated listing response.
    """
    return {
        "items": [normalize_fn(item) for item in items],
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": (total + per_page - 1) // per_page if per_page else 0,
        },
    }
