from mealplanner.access.errors import (
    ConflictError, GoneError, NotFoundError, OwnershipError, RoleError, StorageError,
    TrainerAccessError, ValidationError,
)

RATE_LIMITED = "Rate limit exceeded. Please try again later."


def to_http_outcome(outcome, status=200):
    """Map a guard/service outcome to ``(status, body)``.

    ``outcome`` is either a taxonomy error or a success payload dict.
    Unowned single resources come back as 404 with the same body as a
    missing one.
    """
    if isinstance(outcome, RoleError):
        return 403, {"success": False, "error": outcome.message}
    if isinstance(outcome, OwnershipError):
        return (403 if outcome.collection else 404), {"success": False, "error": outcome.message}
    if isinstance(outcome, ValidationError):
        return 400, {"success": False, "errors": outcome.errors}
    if isinstance(outcome, ConflictError):
        return 409, {"success": False, "error": outcome.message}
    if isinstance(outcome, NotFoundError):
        return 404, {"success": False, "error": outcome.message}
    if isinstance(outcome, GoneError):
        return 410, {"success": False, "error": outcome.message}
    if isinstance(outcome, StorageError):
        return 500, {"success": False, "error": outcome.public_message}
    if isinstance(outcome, TrainerAccessError):
        return 500, {"success": False, "error": "Internal server error"}

    body = {"success": True}
    body.update(outcome or {})
    return status, body


def rate_limited_outcome():
    return 429, {"success": False, "error": RATE_LIMITED}
