import logging
import secrets
from datetime import datetime, timedelta

from mealplanner.access.context import require_trainer
from mealplanner.access.errors import (
    ACCOUNT_EXISTS, INVALID_INVITATION, INVITATION_EXPIRED, INVITATION_USED,
    ConflictError, GoneError, NotFoundError, RoleError, ValidationError,
)
from mealplanner.schemas import load_or_raise
from mealplanner.schemas.invitation import InvitationAcceptSchema, InvitationCreateSchema
from mealplanner.services.trainer_customers import customer_list_prefix, on_storage_failure

logger = logging.getLogger(__name__)

PENDING_INVITATION = "An invitation has already been sent to this email"
PASSWORD_REQUIRED = "Password is required to create your account"
CUSTOMER_ROLE_REQUIRED = "Only customer accounts can accept trainer invitations"

invitation_create_schema = InvitationCreateSchema()
invitation_accept_schema = InvitationAcceptSchema()


class InvitationService:
    """Trainer -> customer invitations, the only way a customer joins a roster.

    Trainers send and list invitations. The invited person accepts with the
    token, either by registering a new customer account under the invited
    email or, when already logged in as that customer, by linking the
    existing account. Acceptance creates the active trainer-customer link.
    """

    def __init__(self, storage, cache, ttl_days=7, clock=datetime.utcnow):
        self.storage = storage
        self.cache = cache
        self.ttl = timedelta(days=ttl_days)
        self.clock = clock

    def _invalidate_customer_list(self, trainer_id):
        try:
            self.cache.delete_prefix(customer_list_prefix(trainer_id))
        except Exception as e:
            logger.error(f"Customer list cache invalidation failed for trainer {trainer_id}: {e}")

    # ------------------------------------------------------------------
    # trainer side
    # ------------------------------------------------------------------
    @on_storage_failure("Failed to send invitation")
    def send_invitation(self, user, payload):
        user = require_trainer(user)
        data = load_or_raise(invitation_create_schema, payload)
        email = data["customer_email"]
        now = self.clock()

        if self.storage.get_pending_invitation(user.id, email, now) is not None:
            raise ConflictError(PENDING_INVITATION)

        token = secrets.token_urlsafe(32)
        invitation = self.storage.create_invitation(
            user.id, email, token, now + self.ttl, data.get("message")
        )
        logger.info(f"Trainer {user.id} invited {email}")
        return dict(invitation, token=token)

    @on_storage_failure("Failed to retrieve invitations")
    def list_invitations(self, user):
        user = require_trainer(user)
        return self.storage.list_invitations(user.id, self.clock())

    # ------------------------------------------------------------------
    # invitee side
    # ------------------------------------------------------------------
    def _usable_invitation(self, token, now):
        invitation = self.storage.get_invitation(token, now) if token else None
        if invitation is None:
            raise NotFoundError(INVALID_INVITATION)
        if invitation["status"] == "accepted":
            raise GoneError(INVITATION_USED)
        if invitation["status"] == "expired":
            raise GoneError(INVITATION_EXPIRED)
        return invitation

    @on_storage_failure("Failed to verify invitation")
    def verify_invitation(self, token):
        invitation = self._usable_invitation(token, self.clock())
        return {
            "customerEmail": invitation["customerEmail"],
            "trainerName": invitation["trainerName"],
            "message": invitation["message"],
            "expiresAt": invitation["expiresAt"],
        }

    @on_storage_failure("Failed to accept invitation")
    def accept_invitation(self, user, payload):
        """Accept as the logged-in customer ``user``, or register when ``user`` is None."""
        data = load_or_raise(invitation_accept_schema, payload)
        now = self.clock()
        invitation = self._usable_invitation(data["token"], now)
        email = invitation["customerEmail"]

        if user is not None:
            if user.role != "customer":
                raise RoleError(CUSTOMER_ROLE_REQUIRED)
            customer = self.storage.accept_invitation(data["token"], now, customer_id=user.id)
        else:
            if self.storage.get_account_by_email(email) is not None:
                raise ConflictError(ACCOUNT_EXISTS)
            if not data.get("password"):
                raise ValidationError([PASSWORD_REQUIRED])
            account = {"name": data.get("name") or email.split("@")[0], "password": data["password"]}
            customer = self.storage.accept_invitation(data["token"], now, account=account)

        self._invalidate_customer_list(invitation["trainerId"])
        logger.info(f"Customer {customer['id']} accepted invitation from trainer {invitation['trainerId']}")
        return customer
