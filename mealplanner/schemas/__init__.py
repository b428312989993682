from marshmallow import ValidationError as MarshmallowValidationError

from mealplanner.access.errors import ValidationError


def flatten_errors(messages):
    """Collapse marshmallow's nested error mapping into a flat, ordered list."""
    flat = []

    def collect(value):
        if isinstance(value, str):
            if value not in flat:
                flat.append(value)
        elif isinstance(value, dict):
            for item in value.values():
                collect(item)
        elif isinstance(value, (list, tuple)):
            for item in value:
                collect(item)

    collect(messages)
    return flat


def load_or_raise(schema, payload):
    """Load ``payload`` reporting every violation at once."""
    try:
        return schema.load(payload if payload is not None else {})
    except MarshmallowValidationError as e:
        raise ValidationError(flatten_errors(e.messages)) from e
