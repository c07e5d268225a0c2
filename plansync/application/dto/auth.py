from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AccessTokenPayload:
    user_id: str
    email: str | None
    roles: tuple[str, ...]
    tenant_ids: tuple[str, ...] = ()

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles

    def can_manage_tenant(self, tenant_id: str) -> bool:
        return self.is_admin or tenant_id in self.tenant_ids
