"""
Refresh token persistence.

Revocation is a conditional UPDATE (revoked = false -> true) so concurrent
callers racing on the same row cannot both observe a successful flip.
"""
from __future__ import annotations

from datetime import datetime

from models.refresh_token import RefreshToken


class RefreshTokenStore:
    def __init__(self, storage):
        self.storage = storage

    def add(self, token: str, user_id: int, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(token=token, user_id=user_id, expires_at=expires_at, revoked=False)
        self.storage.new(record)
        self.storage.save()
        return record

    def find_active(self, token: str) -> RefreshToken | None:
        session = self.storage.get_session()
        return (
            session.query(RefreshToken)
            .filter(RefreshToken.token == token, RefreshToken.revoked.is_(False))
            .first()
        )

    def revoke(self, record: RefreshToken) -> bool:
        session = self.storage.get_session()
        flipped = (
            session.query(RefreshToken)
            .filter(RefreshToken.id == record.id, RefreshToken.revoked.is_(False))
            .update({RefreshToken.revoked: True})
        )
        self.storage.save()
        return flipped == 1

    def revoke_all_for_user(self, user_id: int) -> int:
        session = self.storage.get_session()
        count = (
            session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .update({RefreshToken.revoked: True})
        )
        self.storage.save()
        return count

    def for_user(self, user_id: int) -> list[RefreshToken]:
        session = self.storage.get_session()
        return (
            session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.id.asc())
            .all()
        )
