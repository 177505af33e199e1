"""User and login request schemas."""
from marshmallow import EXCLUDE, Schema, fields, validate


class SignupRequestSchema(Schema):
    """Schema for POST /user."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=validate.Length(max=255))
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    password = fields.Str(required=True, validate=validate.Length(min=8, max=128))
    self_description = fields.Str(
        data_key="selfDescription", load_default="", validate=validate.Length(max=4000)
    )


class LoginRequestSchema(Schema):
    """Schema for POST /login."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=1))


class UpdateUserRequestSchema(Schema):
    """Schema for PATCH /user. Email changes are not supported."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    self_description = fields.Str(
        data_key="selfDescription", load_default="", validate=validate.Length(max=4000)
    )
