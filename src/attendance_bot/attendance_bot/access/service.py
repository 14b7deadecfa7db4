from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_PENDING_LIMIT
from ..core.enums import AccessStatus, RequestStatus
from ..core.exceptions import AuthorizationError, ValidationError
from .model import AccessRequest, AuthorizedUser
from .repository import AccessRepository


class AccessService:
    """Who may receive attendance data, and the owner-approved request flow."""

    def __init__(self, access: AccessRepository, *, owner_user_id: Optional[int] = None):
        self._access = access
        self._owner_user_id = int(owner_user_id) if owner_user_id else None

    @property
    def owner_user_id(self) -> Optional[int]:
        return self._owner_user_id

    def is_owner(self, user_id: int) -> bool:
        return self._owner_user_id is not None and int(user_id) == self._owner_user_id

    def is_authorized(self, user_id: int) -> bool:
        if self.is_owner(user_id):
            return True
        user = self._access.get_authorized(user_id=int(user_id))
        return user is not None and user.status == AccessStatus.ACTIVE

    def _require_owner(self, user_id: int) -> None:
        if not self.is_owner(user_id):
            raise AuthorizationError("Bu amal faqat bot egasi uchun")

    def request_access(self, *, user_id: int, username: Optional[str], chat_id: int) -> int:
        if self._access.get_pending_request(user_id=int(user_id)):
            raise ValidationError("So'rovingiz allaqachon ko'rib chiqilmoqda")
        if self.is_authorized(user_id):
            raise ValidationError("Sizda allaqachon ruxsat bor")

        return self._access.create_request(
            user_id=int(user_id),
            username=(username or "").strip() or None,
            chat_id=int(chat_id),
        )

    def approve(self, *, current_user_id: int, user_id: int) -> AuthorizedUser:
        self._require_owner(current_user_id)

        req = self._access.get_pending_request(user_id=int(user_id))
        if not req:
            raise ValidationError("Kutilayotgan so'rov topilmadi")

        authorized = self._access.save_authorized(
            user_id=req.user_id,
            username=req.username,
            chat_id=req.chat_id,
            authorized_by=int(current_user_id),
        )
        if not self._access.decide_request(
            request_id=req.request_id,
            status=RequestStatus.APPROVED,
            decided_by=int(current_user_id),
        ):
            raise ValidationError("So'rovni tasdiqlab bo'lmadi")
        return authorized

    def reject(self, *, current_user_id: int, user_id: int) -> AccessRequest:
        self._require_owner(current_user_id)

        req = self._access.get_pending_request(user_id=int(user_id))
        if not req:
            raise ValidationError("Kutilayotgan so'rov topilmadi")
        if not self._access.decide_request(
            request_id=req.request_id,
            status=RequestStatus.REJECTED,
            decided_by=int(current_user_id),
        ):
            raise ValidationError("So'rovni rad etib bo'lmadi")
        return req

    def revoke(self, *, current_user_id: int, user_id: int) -> None:
        self._require_owner(current_user_id)
        if not self._access.set_authorized_status(user_id=int(user_id), status=AccessStatus.INACTIVE):
            raise ValidationError("Foydalanuvchi topilmadi")

    def list_pending(self, *, current_user_id: int) -> Sequence[AccessRequest]:
        self._require_owner(current_user_id)
        return self._access.list_requests(status=RequestStatus.PENDING, limit=DEFAULT_PENDING_LIMIT)

    def recipients(self) -> list[int]:
        """Chat ids of active recipients, owner excluded unless authorized too."""
        return [u.chat_id for u in self._access.list_authorized(status=AccessStatus.ACTIVE)]
