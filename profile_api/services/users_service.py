"""
Users service: the credential store plus plain user CRUD.

Password hashing is an explicit step here. A password is only re-hashed
when the update payload actually carries one.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from models.user import User
from utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("username", "display_name", "email")


class UsersService:
    def __init__(self, storage, hasher):
        self.storage = storage
        self.hasher = hasher

    def find_all(self) -> list[User]:
        session = self.storage.get_session()
        return session.query(User).order_by(User.id.asc()).all()

    def find_one(self, user_id: int) -> User | None:
        return self.storage.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        session = self.storage.get_session()
        return session.query(User).filter(User.email == email).first()

    def _ensure_email_free(self, email: str, owner_id: int | None = None) -> None:
        existing = self.find_by_email(email)
        if existing is not None and existing.id != owner_id:
            raise ConflictError("User with this email already exists")

    def _commit(self) -> None:
        try:
            self.storage.save()
        except IntegrityError:
            # lost a race against a concurrent insert with the same email
            raise ConflictError("User with this email already exists")

    def create(self, data: dict) -> User:
        self._ensure_email_free(data["email"])
        user = User(
            username=data["username"],
            display_name=data.get("display_name"),
            email=data["email"],
            password_hash=self.hasher.hash(data["password"]),
        )
        self.storage.new(user)
        self._commit()
        logger.info("Created user id=%s", user.id)
        return user

    def _apply(self, user: User, data: dict, fields) -> None:
        for field in fields:
            if field in data:
                setattr(user, field, data[field])

    def update(self, user_id: int, data: dict) -> User:
        user = self.find_one(user_id)
        if user is None:
            raise NotFoundError(f"User not found with id : {user_id}")
        if "email" in data:
            self._ensure_email_free(data["email"], owner_id=user.id)
        self._apply(user, data, PROFILE_FIELDS)
        if data.get("password"):
            user.password_hash = self.hasher.hash(data["password"])
        self.storage.new(user)
        self._commit()
        return user

    def update_profile(self, user_id: int, data: dict) -> User:
        """Like update() but never touches the password."""
        profile_data = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
        return self.update(user_id, profile_data)

    def delete(self, user_id: int) -> bool:
        user = self.find_one(user_id)
        if user is None:
            return False
        # the relationship cascade removes the user's refresh tokens in the same commit
        removed = len(user.refresh_tokens)
        self.storage.delete(user)
        self.storage.save()
        logger.info("Deleted user id=%s with %d refresh token(s)", user_id, removed)
        return True
