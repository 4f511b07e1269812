# sitebuilder/api/site.py
"""
Public site renderer.

Every route resolves the tenant from the request (Host header or explicit
/sites/<subdomain>) and returns the composed page as JSON. Anything that
does not resolve is a plain 404; storage failures surface through the
StorageError handler.
"""

from flask import Blueprint, abort, g, jsonify, make_response, request

from sitebuilder.application.site.render_site import get_site_pipeline
from sitebuilder.domain.content import ContentKind
from sitebuilder.normalizers.page import normalize_page
from sitebuilder.utils.conditional import not_modified_since

site_bp = Blueprint("site", __name__)


def page_response(page):
    if page is None:
        abort(404)

    g.site_tenant_id = page.tenant.id
    last_modified = page.last_modified

    if not_modified_since(last_modified):
        response = make_response("", 304)
    else:
        response = jsonify(normalize_page(page))

    if last_modified is not None:
        response.last_modified = last_modified
    return response


@site_bp.route("/", methods=["GET"])
async def home():
    page = await get_site_pipeline().render_host(request.host)
    return page_response(page)


@site_bp.route("/pages/<path:slug>", methods=["GET"])
async def page_detail(slug):
    page = await get_site_pipeline().render_kind(request.host, ContentKind.PAGE, slug)
    return page_response(page)


@site_bp.route("/products/<path:slug>", methods=["GET"])
async def product_detail(slug):
    page = await get_site_pipeline().render_kind(request.host, ContentKind.PRODUCT, slug)
    return page_response(page)


@site_bp.route("/posts/<path:slug>", methods=["GET"])
async def post_detail(slug):
    page = await get_site_pipeline().render_kind(request.host, ContentKind.POST, slug)
    return page_response(page)


@site_bp.route("/sites/<subdomain>/", methods=["GET"])
@site_bp.route("/sites/<subdomain>/<path:path>", methods=["GET"])
async def subdomain_site(subdomain, path=None):
    page = await get_site_pipeline().render_subdomain(subdomain, path)
    return page_response(page)


@site_bp.route("/<path:path>", methods=["GET"])
async def catch_all(path):
    page = await get_site_pipeline().render_host(request.host, path)
    return page_response(page)
