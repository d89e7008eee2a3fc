from marshmallow import Schema, fields, pre_load, validate

from models.account import Role
from models.schemas.common import StrippedSchema, norm_email


class RegisterSchema(StrippedSchema):
    email = fields.Email(required=True, validate=validate.Length(max=100))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=6, max=128))
    first_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    last_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    phone = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=20))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = norm_email(data["email"])
        return data


class LoginSchema(StrippedSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = norm_email(data["email"])
        return data


class RefreshTokenSchema(StrippedSchema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class AccountOutSchema(Schema):
    id = fields.String(allow_none=False)
    email = fields.String(allow_none=False)
    first_name = fields.String()
    last_name = fields.String()
    phone = fields.String(allow_none=True)
    role = fields.Enum(Role, by_value=True)


class IdentityOutSchema(Schema):
    """Identity as carried by the access token claims."""
    id = fields.String(attribute="sub")
    email = fields.String()
    first_name = fields.String(attribute="given_name")
    last_name = fields.String(attribute="family_name")
    role = fields.String()
