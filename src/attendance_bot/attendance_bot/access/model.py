from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AccessStatus, RequestStatus


@dataclass(frozen=True)
class AuthorizedUser:
    """A recipient of summaries and update notifications."""

    user_id: int
    username: Optional[str]
    chat_id: int
    status: AccessStatus
    authorized_by: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AccessRequest:
    request_id: int
    user_id: int
    username: Optional[str]
    chat_id: int
    status: RequestStatus
    requested_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return f"@{self.username}" if self.username else str(self.user_id)
