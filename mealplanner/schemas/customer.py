from marshmallow import fields, validate, validates_schema, ValidationError

from mealplanner.schemas.base import RequestSchema

FITNESS_GOALS = ("weight_loss", "muscle_gain", "maintenance", "performance", "general_health")


class CustomerRecordUpdateSchema(RequestSchema):
    notes = fields.String(
        allow_none=True,
        validate=validate.Length(max=2000, error="Notes must be at most 2000 characters"),
    )
    fitness_goal = fields.String(
        data_key="fitnessGoal",
        allow_none=True,
        validate=validate.OneOf(FITNESS_GOALS, error="fitnessGoal must be one of: {choices}"),
    )

    @validates_schema
    def require_change(self, data, **kwargs):
        if not data:
            raise ValidationError("Provide at least one of: notes, fitnessGoal")


class PaginationSchema(RequestSchema):
    offset = fields.Integer(
        load_default=0,
        validate=validate.Range(min=0, error="offset must be zero or greater"),
        error_messages={"invalid": "offset must be an integer"},
    )
    limit = fields.Integer(
        load_default=50,
        validate=validate.Range(min=1, max=100, error="limit must be between 1 and 100"),
        error_messages={"invalid": "limit must be an integer"},
    )
