from flask import abort, jsonify, request
from flask_jwt_extended import jwt_required

from sitebuilder.application.site.render_site import get_site_pipeline
from sitebuilder.normalizers.page import normalize_page
from sitebuilder.utils.decorators import roles_required, site_owner_required
from . import v1_bp


@v1_bp.route("/admin/sites/<site_id>/preview", methods=["GET"])
@jwt_required()
@roles_required("admin")
@site_owner_required
async def preview_site(site_id):
    """
    Compose a page for its author regardless of site status.

    The response carries the composer's diagnostics so authors can see which
    blocks were dropped or repaired.
    """
    pipeline = get_site_pipeline()

    identity = await pipeline.tenants.get_identity(site_id)
    if identity is None:
        abort(404)

    page = await pipeline.render_identity(
        identity, request.args.get("path"), enforce_visibility=False
    )
    if page is None:
        abort(404)

    return jsonify(normalize_page(page, admin=True))
