from flask import abort, g, jsonify, request

from sitebuilder.application.site.render_site import LISTING_KINDS, get_site_pipeline
from sitebuilder.normalizers.content import normalize_entity_summary
from sitebuilder.normalizers.pagination import normalize_pagination
from sitebuilder.utils.pagination import parse_page_args, parse_sort_args
from . import v1_bp


@v1_bp.route("/sites/listing/<kind>", methods=["GET"])
async def site_listing(kind):
    """
    Paginated listing of the requesting site's published content.

    Backs paginated listing-views blocks once the prefetched first page runs
    out.
    """
    content_kind = LISTING_KINDS.get(kind)
    if content_kind is None:
        abort(404)

    page, per_page = parse_page_args()
    sort_by, sort_order = parse_sort_args()

    pipeline = get_site_pipeline()
    identity = pipeline.directory.resolve(request.host)
    if identity is None:
        abort(404)
    g.site_tenant_id = identity.id

    items, total = await pipeline.contents[content_kind].get_all(
        identity.id,
        limit=per_page,
        offset=(page - 1) * per_page,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    return jsonify(normalize_pagination(
        items,
        normalize_entity_summary,
        page=page,
        per_page=per_page,
        total=total,
    ))
