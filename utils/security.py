"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Tuple

import jwt
from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError

from utils.exceptions import InvalidTokenError, TokenExpiredError

ACCESS = "access"
REFRESH = "refresh"


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """One-way salted password hashing; the salt lives inside the encoded hash."""

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4):
        self._ph = _Argon2Hasher(time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism)

    @classmethod
    def from_config(cls, config) -> "PasswordHasher":
        return cls(
            time_cost=config["PASSWORD_HASH_TIME_COST"],
            memory_cost=config["PASSWORD_HASH_MEMORY_COST"],
            parallelism=config["PASSWORD_HASH_PARALLELISM"],
        )

    def hash(self, password: str) -> str:
        """Hash a plaintext password using Argon2
        """
        return self._ph.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """ Verify a plaintext password using argon2
        """
        try:
            return self._ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False


@dataclass(frozen=True)
class AccessTokenClaims:
    subject: int
    email: str | None
    issued_at: datetime
    expires_at: datetime


class TokenSigner:
    """
    Issues and verifies HS256 JWTs.

    Access and refresh tokens are signed with different secrets, so rotating
    one secret never invalidates the other kind of token, and a refresh token
    can never be presented as an access token.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_expires: timedelta = timedelta(minutes=15),
        refresh_expires: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
        issuer: str = "profile-api",
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires
        self.algorithm = algorithm
        self.issuer = issuer

    @classmethod
    def from_config(cls, config) -> "TokenSigner":
        return cls(
            access_secret=config["JWT_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config["JWT_ALGORITHM"],
            issuer=config["JWT_ISSUER"],
        )

    def _encode(self, payload: dict, secret: str) -> str:
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access(self, user_id: int, email: str) -> Tuple[str, datetime]:
        now = _now()
        exp = now + self.access_expires
        payload = {
            "iss": self.issuer,
            "sub": str(user_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "type": ACCESS,
        }
        return self._encode(payload, self.access_secret), exp

    def issue_refresh(self, user_id: int) -> Tuple[str, datetime]:
        now = _now()
        exp = now + self.refresh_expires
        payload = {
            "iss": self.issuer,
            "sub": str(user_id),
            "jti": generate_jti(),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "type": REFRESH,
        }
        return self._encode(payload, self.refresh_secret), exp

    def verify_access(self, token: str) -> AccessTokenClaims:
        """
        Decode and validate an access token. Raises TokenExpiredError once
        past exp and InvalidTokenError for anything else that is wrong.
        """
        try:
            decoded = jwt.decode(
                token,
                self.access_secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["iss", "sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token expired")
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}")

        if decoded.get("type") != ACCESS:
            raise InvalidTokenError("Wrong token type")
        try:
            subject = int(decoded["sub"])
        except (TypeError, ValueError):
            raise InvalidTokenError("Invalid token subject")

        return AccessTokenClaims(
            subject=subject,
            email=decoded.get("email"),
            issued_at=datetime.fromtimestamp(decoded["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(decoded["exp"], tz=timezone.utc),
        )
