from dataclasses import dataclass
from typing import FrozenSet

from ..tenant import TenantStatus


@dataclass(frozen=True)
class VisibilityPolicy:
    """
    Decides which tenant statuses the public resolver may return.

    `active` is always visible and `inactive` never is. Whether `draft`
    sites are public is a deployment decision (SITE_DRAFT_VISIBLE).
    """

    draft_visible: bool = True

    @property
    def visible_statuses(self) -> FrozenSet[TenantStatus]:
        if self.draft_visible:
            return frozenset({TenantStatus.ACTIVE, TenantStatus.DRAFT})
        return frozenset({TenantStatus.ACTIVE})

    def is_visible(self, status) -> bool:
        try:
            status = TenantStatus(status)
        except ValueError:
            return False
        return status in self.visible_statuses

    @classmethod
    def from_config(cls, config) -> "VisibilityPolicy":
        return cls(draft_visible=bool(config.get("SITE_DRAFT_VISIBLE", True)))
