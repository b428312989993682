from marshmallow import EXCLUDE, fields

from mealplanner.extensions import ma


class RequestSchema(ma.Schema):
    """Base for JSON request bodies: unknown keys dropped, non-objects rejected."""

    error_messages = {
        "type": "Request body must be a JSON object",
    }

    class Meta:
        unknown = EXCLUDE


class Number(fields.Float):
    """Float that only accepts JSON numbers. Numeric strings and booleans are invalid."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, (str, bool)):
            raise self.make_error("invalid")
        return super()._deserialize(value, attr, data, **kwargs)
