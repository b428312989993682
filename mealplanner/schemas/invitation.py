from marshmallow import fields, pre_load, validate

from mealplanner.schemas.base import RequestSchema

PASSWORD_RULES = (
    (r"(?s).*[A-Z]", "Password must contain at least one uppercase letter"),
    (r"(?s).*[a-z]", "Password must contain at least one lowercase letter"),
    (r"(?s).*[0-9]", "Password must contain at least one number"),
    (r"(?s).*[^A-Za-z0-9]", "Password must contain at least one special character"),
)


class InvitationCreateSchema(RequestSchema):
    customer_email = fields.Email(
        data_key="customerEmail",
        required=True,
        validate=validate.Length(max=120, error="Email must be at most 120 characters"),
        error_messages={"required": "customerEmail is required", "invalid": "Invalid email format"},
    )
    message = fields.String(
        load_default=None,
        allow_none=True,
        validate=validate.Length(max=500, error="Message must be at most 500 characters"),
    )

    @pre_load
    def normalize_email(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("customerEmail"), str):
            data = dict(data, customerEmail=data["customerEmail"].strip().lower())
        return data


class InvitationAcceptSchema(RequestSchema):
    token = fields.String(
        required=True,
        validate=validate.Length(min=1, max=128, error="Invitation token is required"),
        error_messages={"required": "Invitation token is required"},
    )
    password = fields.String(
        load_default=None,
        allow_none=True,
        validate=[
            validate.Length(min=8, error="Password must be at least 8 characters"),
            *[validate.Regexp(pattern, error=message) for pattern, message in PASSWORD_RULES],
        ],
    )
    name = fields.String(
        load_default=None,
        allow_none=True,
        validate=validate.Length(min=1, max=150, error="Name must be 1-150 characters"),
    )
