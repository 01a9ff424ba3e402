from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import RegistrationRequest


class RegistrationRepository(Protocol):
    def create(self, request: RegistrationRequest) -> None:
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[RegistrationRequest]:
        raise NotImplementedError

    def list(self, *, status: Optional[RequestStatus] = None) -> Sequence[RegistrationRequest]:
        """Newest first."""

        raise NotImplementedError

    def decide(self, request_id: str, *, status: RequestStatus, decided_by: str, decided_at: datetime) -> bool:
        """Move a pending request to a terminal status. False if missing or already decided."""

        raise NotImplementedError
