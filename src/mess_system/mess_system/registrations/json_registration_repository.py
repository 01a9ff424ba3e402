from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..core.enums import RequestStatus
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row, find_one
from .model import RegistrationRequest
from .repository import RegistrationRepository


def _from_row(row: Row) -> RegistrationRequest:
    return RegistrationRequest(
        request_id=row["id"],
        name=row["name"],
        age=int(row["age"]),
        profession=row.get("profession", ""),
        contact_number=row.get("contactNumber", ""),
        username=row["username"],
        password_hash=row.get("passwordHash", ""),
        status=RequestStatus(row["status"]),
        created_at=parse_timestamp(row["timestamp"]),
        decided_by=row.get("decidedBy"),
        decided_at=parse_timestamp(row["decidedAt"]) if row.get("decidedAt") else None,
    )


class JsonRegistrationRepository(RegistrationRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def create(self, request: RegistrationRequest) -> None:
        with self._store.transaction() as doc:
            doc["registrationRequests"].append(
                {
                    "id": request.request_id,
                    "name": request.name,
                    "age": request.age,
                    "profession": request.profession,
                    "contactNumber": request.contact_number,
                    "username": request.username,
                    "passwordHash": request.password_hash,
                    "status": request.status.value,
                    "timestamp": format_timestamp(request.created_at),
                }
            )

    def get(self, request_id: str) -> Optional[RegistrationRequest]:
        with self._store.read() as doc:
            row = find_one(doc["registrationRequests"], lambda r: r["id"] == request_id)
            return _from_row(row) if row else None

    def list(self, *, status: Optional[RequestStatus] = None) -> Sequence[RegistrationRequest]:
        with self._store.read() as doc:
            return [
                _from_row(r)
                for r in reversed(doc["registrationRequests"])
                if status is None or r["status"] == status.value
            ]

    def decide(self, request_id: str, *, status: RequestStatus, decided_by: str, decided_at: datetime) -> bool:
        with self._store.transaction() as doc:
            row = find_one(doc["registrationRequests"], lambda r: r["id"] == request_id)
            if not row or row["status"] != RequestStatus.PENDING.value:
                return False
            row["status"] = status.value
            row["decidedBy"] = decided_by
            row["decidedAt"] = format_timestamp(decided_at)
            return True
