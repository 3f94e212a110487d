from profile_api.services.auth_service import AuthService, AuthPayload
from profile_api.services.refresh_tokens import RefreshTokenStore
from profile_api.services.users_service import UsersService

__all__ = ["AuthService", "AuthPayload", "RefreshTokenStore", "UsersService"]
