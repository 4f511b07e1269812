from sitebuilder.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class ContentMixin(TenantMixin):
    """Columns shared by every sluggable content entity."""

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    is_published = db.Column(db.Boolean, default=False, nullable=False, index=True)
    # keyed mapping or flat list; canonicalized on read
    content_blocks = db.Column(db.JSON, default=dict)


class Page(BaseModel, ContentMixin):
    __tablename__ = 'pages'

    is_homepage = db.Column(db.Boolean, default=False, nullable=False)
    display_order = db.Column(db.Integer, default=0)
    seo = db.Column(db.JSON(none_as_null=True), default=dict)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
    )


class Product(BaseModel, ContentMixin):
    __tablename__ = 'products'

    description = db.Column(db.Text, nullable=True)
    featured_image = db.Column(db.String(512), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_product_slug_per_tenant"),
    )


class Post(BaseModel, ContentMixin):
    __tablename__ = 'posts'

    excerpt = db.Column(db.Text, nullable=True)
    featured_image = db.Column(db.String(512), nullable=True)
    published_at = db.Column(db.DateTime(timezone=True), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_post_slug_per_tenant"),
    )
