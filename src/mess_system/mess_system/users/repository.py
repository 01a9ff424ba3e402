from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import AnyUser


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on the storage format.
    """

    def get_by_id(self, user_id: str) -> Optional[AnyUser]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[AnyUser]:
        """First match in insertion order."""

        raise NotImplementedError

    def list_for_tenant(self, tenant_id: str, *, role: Optional[Role] = None) -> Sequence[AnyUser]:
        raise NotImplementedError

    def create(self, user: AnyUser) -> None:
        raise NotImplementedError

    def update(self, user: AnyUser) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: str) -> bool:
        raise NotImplementedError
