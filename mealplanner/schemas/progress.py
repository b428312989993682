from datetime import date

from marshmallow import ValidationError, fields, validate, validates

from mealplanner.schemas.base import Number, RequestSchema

WEIGHT_MESSAGE = "Weight must be a positive number between 1 and 300 kg"
MEASUREMENTS_MESSAGE = "Measurements must be an object"
MEASUREMENT_VALUE_MESSAGE = "Measurement values must be positive numbers in centimetres"

MEASUREMENT_SITES = (
    "neck", "shoulders", "chest", "waist", "hips",
    "bicepLeft", "bicepRight", "thighLeft", "thighRight",
    "calfLeft", "calfRight", "bodyFatPercentage",
)


class ProgressUpdateSchema(RequestSchema):
    weight_kg = Number(
        data_key="weight",
        required=True,
        allow_none=False,
        validate=validate.Range(min=0, max=300, min_inclusive=False, error=WEIGHT_MESSAGE),
        error_messages={
            "required": WEIGHT_MESSAGE,
            "null": WEIGHT_MESSAGE,
            "invalid": WEIGHT_MESSAGE,
            "special": WEIGHT_MESSAGE,
        },
    )
    measurements = fields.Dict(
        keys=fields.String(validate=validate.OneOf(
            MEASUREMENT_SITES,
            error="Unknown measurement '{input}'",
        )),
        values=Number(
            validate=validate.Range(min=0, max=500, min_inclusive=False, error=MEASUREMENT_VALUE_MESSAGE),
            error_messages={
                "invalid": MEASUREMENT_VALUE_MESSAGE,
                "null": MEASUREMENT_VALUE_MESSAGE,
                "special": MEASUREMENT_VALUE_MESSAGE,
            },
        ),
        load_default=None,
        allow_none=True,
        error_messages={"invalid": MEASUREMENTS_MESSAGE},
    )
    notes = fields.String(
        load_default=None,
        allow_none=True,
        validate=validate.Length(max=2000, error="Notes must be at most 2000 characters"),
        error_messages={"invalid": "Notes must be text"},
    )
    recorded_date = fields.Date(
        data_key="recordedDate",
        load_default=None,
        error_messages={"invalid": "recordedDate must be an ISO date (YYYY-MM-DD)"},
    )

    @validates("recorded_date")
    def not_in_future(self, value, **kwargs):
        if value is not None and value > date.today():
            raise ValidationError("recordedDate cannot be in the future")
