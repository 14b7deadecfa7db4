from __future__ import annotations

from enum import Enum


class LateAction(str, Enum):
    """Direction of a late update relative to the morning submission."""

    ARRIVED = "arrived"
    DEPARTED = "departed"


class AccessStatus(str, Enum):
    """Status of an authorized recipient."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class RequestStatus(str, Enum):
    """Status of an access request in the approval flow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ChatType(str, Enum):
    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"
