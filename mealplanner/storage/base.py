"""Storage port consumed by the trainer access layer.

Every method returns plain dicts (or lists of dicts) so that SQL and
in-memory implementations are interchangeable. Failures of the backing
store surface as ``StorageError``.
"""
from abc import ABC, abstractmethod


class Storage(ABC):

    # --- ownership -------------------------------------------------------
    @abstractmethod
    def has_active_assignment(self, trainer_id, customer_id):
        """True iff an active trainer/customer link exists for a customer account."""

    # --- scoped reads ----------------------------------------------------
    @abstractmethod
    def list_customers_for_trainer(self, trainer_id, offset, limit):
        """Return ``(customers, total)`` ordered by assigned date desc, customer id asc."""

    @abstractmethod
    def get_customer_for_trainer(self, trainer_id, customer_id):
        """Customer dict joined through an active link, or None."""

    @abstractmethod
    def list_meal_plan_assignments(self, trainer_id, customer_id):
        pass

    @abstractmethod
    def list_progress(self, trainer_id, customer_id):
        pass

    # --- roster ----------------------------------------------------------
    @abstractmethod
    def deactivate_assignment(self, trainer_id, customer_id):
        pass

    @abstractmethod
    def update_assignment_record(self, trainer_id, customer_id, changes):
        pass

    # --- meal plans ------------------------------------------------------
    @abstractmethod
    def list_meal_plans(self, trainer_id):
        pass

    @abstractmethod
    def create_meal_plan(self, trainer_id, data):
        pass

    @abstractmethod
    def get_meal_plan(self, trainer_id, meal_plan_id):
        """Meal plan owned by the trainer, or None."""

    @abstractmethod
    def create_meal_plan_assignments(self, trainer_id, meal_plan_id, customer_ids, start_date, notes=None):
        """Insert one assignment per customer in a single transaction.

        The active link for every customer is re-checked inside that
        transaction; a missing link raises ``OwnershipError`` and nothing
        is written. A customer that already holds an active assignment of
        the same plan raises ``ConflictError``.
        """

    @abstractmethod
    def cancel_meal_plan_assignment(self, trainer_id, customer_id, assignment_id):
        """Flip an active assignment to cancelled. Returns the dict or None."""

    # --- progress --------------------------------------------------------
    @abstractmethod
    def create_progress(self, trainer_id, customer_id, data):
        """Append a progress row, re-checking the active link in the same transaction."""

    # --- invitations -----------------------------------------------------
    @abstractmethod
    def get_pending_invitation(self, trainer_id, email, now):
        """Unused, unexpired invitation from this trainer to ``email``, or None."""

    @abstractmethod
    def create_invitation(self, trainer_id, email, token, expires_at, message=None):
        pass

    @abstractmethod
    def list_invitations(self, trainer_id, now):
        """Trainer's invitations, newest first, each with a computed ``status``."""

    @abstractmethod
    def get_invitation(self, token, now):
        """Invitation dict (with ``status`` as of ``now``) or None."""

    @abstractmethod
    def get_account_by_email(self, email):
        """``{"id", "role"}`` for the account registered under ``email``, or None."""

    @abstractmethod
    def accept_invitation(self, token, now, customer_id=None, account=None):
        """Consume an invitation and create the active link in one transaction.

        Links the existing customer ``customer_id`` or, when ``account``
        (``{"name", "password"}``) is given, registers a new customer under
        the invited email first. The invitation is re-read and locked inside
        the transaction: unknown tokens raise ``NotFoundError``, spent or
        expired ones ``GoneError``. A customer that already has an active
        trainer raises ``ConflictError``. Returns the customer's user dict.
        """
