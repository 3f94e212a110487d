from __future__ import annotations
from functools import wraps

from utils.exceptions import TokenExpiredError, TokenError, UnauthenticatedError


def jwt_required():
    """
    Gate a GraphQL resolver behind a valid access token.

    The transport puts the bearer token and the services into the GraphQL
    context. The resolved User is handed to the resolver explicitly as
    the ``current_user`` keyword argument.
    Revoked refresh tokens are not consulted: an access token stays usable
    until it expires.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(obj, info, *args, **kwargs):
            context = info.context
            token = context.get("token")
            if not token:
                raise UnauthenticatedError("Missing or invalid Authorization header")
            try:
                claims = context["token_signer"].verify_access(token)
            except TokenExpiredError:
                raise UnauthenticatedError("Access token expired")
            except TokenError as e:
                raise UnauthenticatedError(str(e))

            user = context["auth_service"].validate_user_by_id(claims.subject)
            if not user:
                raise UnauthenticatedError("User not found")
            kwargs["current_user"] = user
            return fn(obj, info, *args, **kwargs)

        return wrapper

    return decorator
