from sitebuilder.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class SiteBlock(BaseModel, TenantMixin):
    """Legacy site-level blocks, one row per block type, predating pages."""

    __tablename__ = "site_blocks"

    block_type = db.Column(db.String(100), nullable=False)  # navigation, hero, footer
    display_order = db.Column(db.Integer, nullable=True)
    content = db.Column(db.JSON, default=dict)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    tenant = db.relationship("Tenant", back_populates="site_blocks")

    __table_args__ = (
        db.Index("idx_site_block_tenant_order", "tenant_id", "display_order"),
    )

    def to_raw(self):
        return {
            "id": self.id,
            "type": self.block_type,
            "content": self.content,
            "display_order": self.display_order,
        }
