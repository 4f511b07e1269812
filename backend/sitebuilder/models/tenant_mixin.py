from sqlalchemy.orm import declared_attr

from sitebuilder.extensions import db


class TenantMixin:
    @declared_attr
    def tenant_id(cls):
        return db.Column(
            db.String(36),
            db.ForeignKey('tenants.id'),
            nullable=False,
            index=True
        )
