from sqlalchemy.orm import validates

from sitebuilder.extensions import db
from sitebuilder.domain.tenant import TenantIdentity, TenantStatus
from .base import BaseModel


class Tenant(BaseModel):
    __tablename__ = "tenants"

    name = db.Column(db.String(255), nullable=False)
    subdomain = db.Column(db.String(63), unique=True, nullable=False, index=True)
    custom_domain = db.Column(db.String(255), unique=True, nullable=True, index=True)
    status = db.Column(db.String(20), nullable=False, default=TenantStatus.DRAFT.value, index=True)

    # navigation / footer / url_prefixes / fonts / animations live here
    settings = db.Column(db.JSON, default=dict)

    theme_id = db.Column(db.String(36), db.ForeignKey("themes.id"), nullable=True)
    theme = db.relationship("Theme", lazy="joined")

    site_blocks = db.relationship(
        "SiteBlock",
        back_populates="tenant",
        order_by="SiteBlock.display_order",
        cascade="all, delete-orphan",
    )

    @validates("subdomain", "custom_domain")
    def _lowercase_host(self, key, value):
        return value.strip().lower() if value else None

    @validates("status")
    def _known_status(self, key, value):
        return TenantStatus(value).value

    def to_identity(self) -> TenantIdentity:
        return TenantIdentity(
            id=self.id,
            subdomain=self.subdomain,
            custom_domain=self.custom_domain,
            status=TenantStatus(self.status),
        )
