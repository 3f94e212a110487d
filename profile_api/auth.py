"""
Authentication resolvers:
- register
- login
- refreshToken
- logout          (access token required)
- profile         (access token required)
- updateProfile   (access token required)
- deleteProfile   (access token required)

Input is validated with marshmallow; the session logic itself lives in
profile_api.services.auth_service.
Resolver keyword arguments carry the GraphQL argument names (registerDto, ...)
that the web client sends.
"""
from __future__ import annotations

from models.schemas.user import LoginSchema, ProfileUpdateSchema, RefreshTokenSchema, RegisterSchema
from utils.decorators import jwt_required

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
profile_update_schema = ProfileUpdateSchema()


def _auth_service(info):
    return info.context["auth_service"]


def _token_response(payload) -> dict:
    return {
        "accessToken": payload.access_token,
        "refreshToken": payload.refresh_token,
        "user": payload.user,
    }


def resolve_register(_, info, registerDto):
    payload = register_schema.load(registerDto)
    return _token_response(_auth_service(info).register(payload))


def resolve_login(_, info, loginDto):
    payload = login_schema.load(loginDto)
    return _token_response(_auth_service(info).login(payload["email"], payload["password"]))


def resolve_refresh_token(_, info, refreshTokenDto):
    payload = refresh_token_schema.load(refreshTokenDto)
    return _token_response(_auth_service(info).refresh_access_token(payload["refresh_token"]))


@jwt_required()
def resolve_logout(_, info, refreshToken, current_user):
    return _auth_service(info).logout(refreshToken)


@jwt_required()
def resolve_profile(_, info, current_user):
    return current_user


@jwt_required()
def resolve_update_profile(_, info, updateUserDto, current_user):
    payload = profile_update_schema.load(updateUserDto)
    return _auth_service(info).update_profile(current_user.id, payload)


@jwt_required()
def resolve_delete_profile(_, info, current_user):
    return _auth_service(info).delete_profile(current_user.id)
