from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Tenant, TenantSettings


class TenantRepository(Protocol):
    def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Tenant]:
        raise NotImplementedError

    def create(self, tenant: Tenant) -> None:
        raise NotImplementedError

    def update_settings(self, tenant_id: str, settings: TenantSettings) -> bool:
        raise NotImplementedError
