"""
Session service: register / login / refresh / logout and the caller's own profile.

Refresh token lifecycle:
    Active -> Expired (noticed lazily on use) -> Revoked
    Active -> Revoked (logout, or a newer login)
Nothing leaves Revoked.

Refreshing does not rotate the refresh token: the same string is handed
back until it expires or is revoked. A new one is only minted on
register and login.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from models.user import User
from profile_api.services.refresh_tokens import RefreshTokenStore
from profile_api.services.users_service import UsersService
from utils.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class AuthPayload:
    access_token: str
    refresh_token: str
    user: User


class AuthService:
    def __init__(self, storage, hasher, signer):
        self.storage = storage
        self.hasher = hasher
        self.signer = signer
        self.users = UsersService(storage, hasher)
        self.refresh_tokens = RefreshTokenStore(storage)

    def validate_user(self, email: str, password: str) -> User | None:
        user = self.users.find_by_email(email)
        if user is not None and self.hasher.verify(password, user.password_hash):
            return user
        return None

    def validate_user_by_id(self, user_id: int) -> User | None:
        return self.users.find_one(user_id)

    def _issue(self, user: User) -> AuthPayload:
        access_token, _ = self.signer.issue_access(user.id, user.email)
        refresh_token, expires_at = self.signer.issue_refresh(user.id)
        self.refresh_tokens.add(refresh_token, user.id, expires_at)
        return AuthPayload(access_token=access_token, refresh_token=refresh_token, user=user)

    def register(self, data: dict) -> AuthPayload:
        user = self.users.create(data)
        logger.info("Registered user id=%s", user.id)
        return self._issue(user)

    def login(self, email: str, password: str) -> AuthPayload:
        user = self.validate_user(email, password)
        if user is None:
            # same answer for unknown email and wrong password
            logger.warning("Failed login attempt")
            raise UnauthorizedError("Invalid credentials")

        revoked = self.revoke_all_user_tokens(user.id)
        logger.info("User id=%s logged in, revoked %d previous refresh token(s)", user.id, revoked)
        return self._issue(user)

    def refresh_access_token(self, token: str) -> AuthPayload:
        record = self.refresh_tokens.find_active(token)
        if record is None:
            raise UnauthorizedError("Invalid refresh token")

        if record.is_expired():
            self.refresh_tokens.revoke(record)
            logger.info("Refresh token id=%s expired, revoked", record.id)
            raise UnauthorizedError("Expired refresh token! Please login again")

        user = self.validate_user_by_id(record.user_id)
        if user is None:
            raise UnauthorizedError("Invalid user")

        access_token, _ = self.signer.issue_access(user.id, user.email)
        logger.info("Refreshed access token for user id=%s", user.id)
        return AuthPayload(access_token=access_token, refresh_token=record.token, user=user)

    def logout(self, token: str) -> bool:
        record = self.refresh_tokens.find_active(token)
        if record is None:
            return False
        flipped = self.refresh_tokens.revoke(record)
        if flipped:
            logger.info("User id=%s logged out", record.user_id)
        return flipped

    def revoke_all_user_tokens(self, user_id: int) -> int:
        return self.refresh_tokens.revoke_all_for_user(user_id)

    def update_profile(self, user_id: int, data: dict) -> User:
        return self.users.update_profile(user_id, data)

    def delete_profile(self, user_id: int) -> bool:
        return self.users.delete(user_id)
