from sitebuilder.domain.blocks import BLOCK_SCHEMA_VERSION

from .block import normalize_block
from .content import normalize_entity


def normalize_tenant(tenant, admin=False):
    data = {
        "id": tenant.id,
        "name": tenant.name,
        "subdomain": tenant.subdomain,
        "custom_domain": tenant.custom_domain,
        "theme": tenant.theme or {},
        "settings": {
            k: v for k, v in tenant.settings.items()
            if k not in ("navigation", "footer")
        },
    }
    if admin:
        data["status"] = tenant.status.value
    return data


def normalize_page(page, admin=False):
    """
    Public JSON shape of a ResolvedPage.

    `blocks` is the full render order; `navigation` and `footer` repeat the
    shared chrome so a renderer can place it without scanning.
    """
    data = {
        "tenant": normalize_tenant(page.tenant, admin=admin),
        "schema_version": BLOCK_SCHEMA_VERSION,
        "kind": page.kind.value,
        "entity": normalize_entity(page.entity, admin=admin) if page.entity else None,
        "navigation": normalize_block(page.navigation, admin=admin) if page.navigation else None,
        "footer": normalize_block(page.footer, admin=admin) if page.footer else None,
        "blocks": [normalize_block(b, admin=admin) for b in page.blocks],
        "listing_data": page.listing_data,
    }

    if admin:
        data["diagnostics"] = [d.to_dict() for d in page.diagnostics]

    return data
