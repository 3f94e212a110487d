from marshmallow import Schema, fields, pre_load, validates

from models.schemas.common import normalize_email, validate_password_strength, validate_not_blank


class _EmailNormalizingSchema(Schema):
    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("email"), str):
            data = dict(data)
            data["email"] = normalize_email(data["email"])
        return data


class RegisterSchema(_EmailNormalizingSchema):
    username = fields.String(required=True, validate=validate_not_blank)
    display_name = fields.String(data_key="displayName", allow_none=True, load_default=None)
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        validate_password_strength(value)


# createUser takes the same payload as register
UserCreateSchema = RegisterSchema


class LoginSchema(_EmailNormalizingSchema):
    # no strength check here: a weak password simply fails to verify
    email = fields.String(required=True, validate=validate_not_blank)
    password = fields.String(required=True, validate=validate_not_blank, load_only=True)


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(data_key="refreshToken", required=True, validate=validate_not_blank)


class ProfileUpdateSchema(_EmailNormalizingSchema):
    username = fields.String(validate=validate_not_blank)
    display_name = fields.String(data_key="displayName", allow_none=True)
    email = fields.Email()


class UserUpdateSchema(ProfileUpdateSchema):
    password = fields.String(load_only=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        validate_password_strength(value)
