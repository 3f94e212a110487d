from ariadne import QueryType, MutationType, ObjectType, make_executable_schema

from profile_api.schema import type_defs
from profile_api import auth, users

query = QueryType()
mutation = MutationType()
user_type = ObjectType("User")


@query.field("health")
def resolve_health(*_):
    return "ok"


query.set_field("profile", auth.resolve_profile)
query.set_field("users", users.resolve_users)
query.set_field("user", users.resolve_user)

mutation.set_field("register", auth.resolve_register)
mutation.set_field("login", auth.resolve_login)
mutation.set_field("refreshToken", auth.resolve_refresh_token)
mutation.set_field("logout", auth.resolve_logout)
mutation.set_field("updateProfile", auth.resolve_update_profile)
mutation.set_field("deleteProfile", auth.resolve_delete_profile)
mutation.set_field("createUser", users.resolve_create_user)
mutation.set_field("updateUser", users.resolve_update_user)
mutation.set_field("deleteUser", users.resolve_delete_user)

user_type.set_alias("displayName", "display_name")


def _isoformat(value):
    return value.isoformat() if value is not None else None


@user_type.field("createdAt")
def resolve_created_at(user, *_):
    return _isoformat(user.created_at)


@user_type.field("updatedAt")
def resolve_updated_at(user, *_):
    return _isoformat(user.updated_at)


schema = make_executable_schema(type_defs, query, mutation, user_type)
