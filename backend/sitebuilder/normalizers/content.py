from sitebuilder.domain.content import ContentEntity


def normalize_entity_summary(entity: ContentEntity):
    """Card-sized view used by listings; blocks are left out."""
    return {
        "id": entity.id,
        "kind": entity.kind.value,
        "slug": entity.slug,
        "title": entity.title,
        "description": entity.description,
        "featured_image": entity.featured_image,
        "updated_at": entity.updated_at.isoformat() if entity.updated_at else None,
        **entity.extra,
    }


def normalize_entity(entity: ContentEntity, admin=False):
    data = normalize_entity_summary(entity)
    if admin:
        data["is_published"] = entity.is_published
        data["block_count"] = len(entity.blocks)
    return data
