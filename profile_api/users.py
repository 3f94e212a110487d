"""
User CRUD resolvers.

Reading users is public; the password hash is never part of the User type.
Every mutation needs an access token, and updateUser/deleteUser only act on
the caller's own account.
"""
from __future__ import annotations

from models.schemas.user import UserCreateSchema, UserUpdateSchema
from utils.decorators import jwt_required
from utils.exceptions import ForbiddenError

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()


def _users_service(info):
    return info.context["auth_service"].users


def _ensure_self(current_user, user_id: int) -> None:
    if current_user.id != user_id:
        raise ForbiddenError("You can only modify your own account")


def resolve_users(_, info):
    return _users_service(info).find_all()


def resolve_user(_, info, id):
    return _users_service(info).find_one(id)


@jwt_required()
def resolve_create_user(_, info, createUserDto, current_user):
    payload = user_create_schema.load(createUserDto)
    return _users_service(info).create(payload)


@jwt_required()
def resolve_update_user(_, info, id, updateUserDto, current_user):
    _ensure_self(current_user, id)
    payload = user_update_schema.load(updateUserDto)
    return _users_service(info).update(id, payload)


@jwt_required()
def resolve_delete_user(_, info, id, current_user):
    _ensure_self(current_user, id)
    return _users_service(info).delete(id)
