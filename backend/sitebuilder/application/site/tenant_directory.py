# sitebuilder/application/site/tenant_directory.py
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from sitebuilder.domain.exceptions import StorageError
from sitebuilder.domain.lifecycle.tenant import VisibilityPolicy
from sitebuilder.domain.tenant import TenantIdentity, TenantStatus

logger = structlog.get_logger(__name__)

LOCALHOST = "localhost"


def split_host(host: Optional[str]):
    """Return (normalized host, hostname without port)."""
    host = (host or "").strip().lower()
    return host, host.split(":", 1)[0]


class TenantDirectory(ABC):
    """
    Maps an inbound Host header to a tenant identity.

    Precedence, first match wins:
    1. exact custom domain (port included)
    2. bare `localhost` -> tenant owning the local-dev custom domain
    3. first hostname label -> subdomain

    Tenants outside the visibility policy are invisible, so a match on them
    falls through to the next rule. Absence is None, never an exception.
    """

    def __init__(self, *, policy: VisibilityPolicy, local_dev_domain: str = "localhost:3000"):
        self.policy = policy
        self.local_dev_domain = (local_dev_domain or "").strip().lower()

    @property
    def statuses(self) -> FrozenSet[TenantStatus]:
        return self.policy.visible_statuses

    @abstractmethod
    def _by_custom_domain(self, domain: str) -> Optional[TenantIdentity]:
        ...

    @abstractmethod
    def _by_subdomain(self, subdomain: str) -> Optional[TenantIdentity]:
        ...

    def resolve(self, host: Optional[str]) -> Optional[TenantIdentity]:
        host, hostname = split_host(host)
        if not hostname:
            return None

        identity = self._by_custom_domain(host)
        if identity is not None:
            return identity

        if hostname == LOCALHOST and self.local_dev_domain:
            identity = self._by_custom_domain(self.local_dev_domain)
            if identity is not None:
                return identity

        return self.resolve_subdomain(hostname.split(".", 1)[0])

    def resolve_subdomain(self, subdomain: Optional[str]) -> Optional[TenantIdentity]:
        subdomain = (subdomain or "").strip().lower()
        if not subdomain:
            return None
        return self._by_subdomain(subdomain)


class StaticTenantDirectory(TenantDirectory):
    """Directory over an in-memory mapping table (config-file backed)."""

    def __init__(self, identities: Iterable[TenantIdentity], **kwargs):
        super().__init__(**kwargs)
        self.identities: List[TenantIdentity] = list(identities)

    def _first(self, predicate) -> Optional[TenantIdentity]:
        for identity in self.identities:
            if identity.status in self.statuses and predicate(identity):
                return identity
        return None

    def _by_custom_domain(self, domain):
        return self._first(
            lambda i: (i.custom_domain or "").lower() == domain
        )

    def _by_subdomain(self, subdomain):
        return self._first(lambda i: i.subdomain.lower() == subdomain)

    @classmethod
    def from_file(cls, path: str, **kwargs) -> "StaticTenantDirectory":
        with open(path, encoding="utf-8") as fh:
            rows = json.load(fh)

        identities = []
        for row in rows:
            try:
                identities.append(
                    TenantIdentity(
                        id=str(row["id"]),
                        subdomain=str(row["subdomain"]),
                        custom_domain=row.get("custom_domain"),
                        status=TenantStatus(row.get("status", "draft")),
                    )
                )
            except (KeyError, ValueError, TypeError):
                logger.warning("site_mapping_skipped", path=path, row=row)

        logger.info("site_mappings_loaded", path=path, count=len(identities))
        return cls(identities, **kwargs)


class SqlTenantDirectory(TenantDirectory):
    """Directory backed by the tenants table."""

    def _lookup(self, **filters) -> Optional[TenantIdentity]:
        from sitebuilder.models.tenant import Tenant

        try:
            row = (
                Tenant.query
                .filter_by(**filters)
                .filter(Tenant.status.in_([s.value for s in self.statuses]))
                .first()
            )
        except SQLAlchemyError as exc:
            logger.error("storage_error", operation="tenant_directory", error=str(exc))
            raise StorageError("Tenant lookup failed", operation="tenant_directory") from exc

        return row.to_identity() if row else None

    def _by_custom_domain(self, domain):
        return self._lookup(custom_domain=domain)

    def _by_subdomain(self, subdomain):
        return self._lookup(subdomain=subdomain)
