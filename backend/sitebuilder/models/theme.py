from sitebuilder.extensions import db
from .base import BaseModel


class Theme(BaseModel):
    __tablename__ = "themes"

    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # `metadata` is reserved on declarative models
    theme_metadata = db.Column("metadata", db.JSON, default=dict)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "metadata": self.theme_metadata or {},
        }
