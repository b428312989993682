TRAINER_ROLE_REQUIRED = "Access denied: Trainer role required"
CUSTOMER_NOT_FOUND = "Customer not found or not assigned to you"
INVALID_INVITATION = "Invalid invitation token"
INVITATION_EXPIRED = "Invitation has expired"
INVITATION_USED = "Invitation has already been used"
ALREADY_HAS_TRAINER = "You already have an active trainer"
ACCOUNT_EXISTS = "An account already exists for this email. Log in to accept the invitation."
DUPLICATE_MEAL_PLAN_ASSIGNMENT = "Meal plan already assigned to this customer"


class TrainerAccessError(Exception):
    """Base class for every outcome that stops a trainer request short."""

    def __init__(self, message=None):
        super().__init__(message)
        self.message = message


class RoleError(TrainerAccessError):
    def __init__(self, message=TRAINER_ROLE_REQUIRED):
        super().__init__(message)


class OwnershipError(TrainerAccessError):
    """Caller has no active assignment to the target.

    Single-resource failures (the default) are reported exactly like a
    missing resource. ``collection=True`` marks a batch action that touched
    at least one customer outside the caller's roster.
    """

    def __init__(self, message=CUSTOMER_NOT_FOUND, collection=False):
        super().__init__(message)
        self.collection = collection


class ValidationError(TrainerAccessError):
    def __init__(self, errors):
        super().__init__("Validation failed")
        self.errors = list(errors)


class ConflictError(TrainerAccessError):
    pass


class StorageError(TrainerAccessError):
    """Backing store failure. ``detail`` is for logs only."""

    def __init__(self, detail=None, public_message="Internal server error"):
        super().__init__(public_message)
        self.detail = detail
        self.public_message = public_message


class NotFoundError(TrainerAccessError):
    """Lookup by an opaque key (e.g. an invitation token) matched nothing."""


class GoneError(TrainerAccessError):
    """Resource existed but can no longer be used (expired or consumed invitation)."""
