from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AccessStatus, RequestStatus
from .model import AccessRequest, AuthorizedUser


class AccessRepository(Protocol):
    # Authorized recipients
    def get_authorized(self, *, user_id: int) -> Optional[AuthorizedUser]:
        raise NotImplementedError

    def list_authorized(self, *, status: AccessStatus = AccessStatus.ACTIVE) -> Sequence[AuthorizedUser]:
        raise NotImplementedError

    def save_authorized(
        self,
        *,
        user_id: int,
        username: Optional[str],
        chat_id: int,
        authorized_by: Optional[int],
    ) -> AuthorizedUser:
        """Insert, or re-activate an existing row."""

        raise NotImplementedError

    def set_authorized_status(self, *, user_id: int, status: AccessStatus) -> bool:
        raise NotImplementedError

    # Pending requests
    def get_pending_request(self, *, user_id: int) -> Optional[AccessRequest]:
        raise NotImplementedError

    def create_request(self, *, user_id: int, username: Optional[str], chat_id: int) -> int:
        raise NotImplementedError

    def decide_request(self, *, request_id: int, status: RequestStatus, decided_by: int) -> bool:
        """Only a PENDING request can be decided."""

        raise NotImplementedError

    def list_requests(self, *, status: Optional[RequestStatus] = None, limit: int = 50) -> Sequence[AccessRequest]:
        raise NotImplementedError
