from marshmallow import fields, validate

from mealplanner.schemas.base import RequestSchema

START_DATE_MESSAGE = "startDate must be an ISO date (YYYY-MM-DD)"


class MealPlanCreateSchema(RequestSchema):
    name = fields.String(
        required=True,
        validate=validate.Length(min=1, max=255, error="Meal plan name must be 1-255 characters"),
        error_messages={"required": "Meal plan name is required", "invalid": "Meal plan name must be text"},
    )
    description = fields.String(load_default=None, allow_none=True)
    days = fields.Integer(
        load_default=7,
        strict=True,
        validate=validate.Range(min=1, max=30, error="days must be between 1 and 30"),
        error_messages={"invalid": "days must be a whole number"},
    )
    plan_data = fields.Dict(
        data_key="planData",
        load_default=dict,
        error_messages={"invalid": "planData must be an object"},
    )


class MealPlanAssignSchema(RequestSchema):
    meal_plan_id = fields.String(
        data_key="mealPlanId",
        required=True,
        validate=validate.Length(min=1, max=64, error="mealPlanId is required"),
        error_messages={"required": "mealPlanId is required", "invalid": "mealPlanId must be a string"},
    )
    start_date = fields.Date(
        data_key="startDate",
        required=True,
        error_messages={"required": "startDate is required", "invalid": START_DATE_MESSAGE},
    )
    notes = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=2000))


class BulkMealPlanAssignSchema(RequestSchema):
    customer_ids = fields.List(
        fields.String(validate=validate.Length(min=1, max=64)),
        data_key="customerIds",
        required=True,
        validate=validate.Length(min=1, max=100, error="customerIds must hold between 1 and 100 ids"),
        error_messages={"required": "customerIds is required", "invalid": "customerIds must be a list"},
    )
    start_date = fields.Date(
        data_key="startDate",
        required=True,
        error_messages={"required": "startDate is required", "invalid": START_DATE_MESSAGE},
    )
    notes = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=2000))
