import logging
from datetime import datetime
from functools import wraps

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import contains_eager

from mealplanner.access.errors import (
    ACCOUNT_EXISTS, ALREADY_HAS_TRAINER, DUPLICATE_MEAL_PLAN_ASSIGNMENT, INVALID_INVITATION,
    INVITATION_EXPIRED, INVITATION_USED, ConflictError, GoneError, NotFoundError,
    OwnershipError, StorageError,
)
from mealplanner.models import (
    User, TrainerCustomer, MealPlan, MealPlanAssignment, CustomerProgress, CustomerInvitation
)
from mealplanner.storage.base import Storage

logger = logging.getLogger(__name__)

ACTIVE = "active"


def storage_call(method):
    """Roll back and re-raise database failures as StorageError."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.db.session.rollback()
            logger.exception(f"Storage failure in {method.__name__}")
            raise StorageError(detail=str(e)) from e
    return wrapper


class SQLAlchemyStorage(Storage):
    """Storage port over a Flask-SQLAlchemy session. All queries use bound parameters."""

    def __init__(self, db):
        self.db = db

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _active_links(self, trainer_id):
        return (
            self.db.session.query(TrainerCustomer)
            .join(User, User.id == TrainerCustomer.customer_id)
            .options(contains_eager(TrainerCustomer.customer))
            .filter(
                TrainerCustomer.trainer_id == trainer_id,
                TrainerCustomer.status == ACTIVE,
                User.role == "customer",
            )
        )

    def _active_link(self, trainer_id, customer_id, lock=False):
        query = self._active_links(trainer_id).filter(TrainerCustomer.customer_id == customer_id)
        if lock:
            query = query.with_for_update(of=TrainerCustomer)
        return query.first()

    def _require_link_in_transaction(self, trainer_id, customer_id):
        link = self._active_link(trainer_id, customer_id, lock=True)
        if link is None:
            self.db.session.rollback()
            raise OwnershipError()
        return link

    def _has_active_trainer(self, customer_id):
        return (
            self.db.session.query(TrainerCustomer.id)
            .filter_by(customer_id=customer_id, status=ACTIVE)
            .first()
        ) is not None

    def _has_active_duplicate(self, meal_plan_id, customer_ids):
        return (
            self.db.session.query(MealPlanAssignment.id)
            .filter(
                MealPlanAssignment.meal_plan_id == meal_plan_id,
                MealPlanAssignment.customer_id.in_(customer_ids),
                MealPlanAssignment.status == ACTIVE,
            )
            .first()
        ) is not None

    # ------------------------------------------------------------------
    # ownership
    # ------------------------------------------------------------------
    @storage_call
    def has_active_assignment(self, trainer_id, customer_id):
        row = (
            self.db.session.query(TrainerCustomer.id)
            .join(User, User.id == TrainerCustomer.customer_id)
            .filter(
                TrainerCustomer.customer_id == customer_id,
                TrainerCustomer.trainer_id == trainer_id,
                TrainerCustomer.status == ACTIVE,
                User.role == "customer",
            )
            .first()
        )
        return row is not None

    # ------------------------------------------------------------------
    # scoped reads
    # ------------------------------------------------------------------
    @storage_call
    def list_customers_for_trainer(self, trainer_id, offset, limit):
        query = self._active_links(trainer_id)
        total = query.count()
        links = (
            query.order_by(TrainerCustomer.assigned_date.desc(), TrainerCustomer.customer_id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [link.to_customer_dict() for link in links], total

    @storage_call
    def get_customer_for_trainer(self, trainer_id, customer_id):
        link = self._active_link(trainer_id, customer_id)
        return link.to_customer_dict() if link else None

    @storage_call
    def list_meal_plan_assignments(self, trainer_id, customer_id):
        assignments = (
            self.db.session.query(MealPlanAssignment)
            .join(TrainerCustomer, and_(
                TrainerCustomer.customer_id == MealPlanAssignment.customer_id,
                TrainerCustomer.trainer_id == trainer_id,
                TrainerCustomer.status == ACTIVE,
            ))
            .filter(MealPlanAssignment.customer_id == customer_id)
            .order_by(MealPlanAssignment.assigned_at.desc(), MealPlanAssignment.id.asc())
            .all()
        )
        return [a.to_dict() for a in assignments]

    @storage_call
    def list_progress(self, trainer_id, customer_id):
        records = (
            self.db.session.query(CustomerProgress)
            .join(TrainerCustomer, and_(
                TrainerCustomer.customer_id == CustomerProgress.customer_id,
                TrainerCustomer.trainer_id == trainer_id,
                TrainerCustomer.status == ACTIVE,
            ))
            .filter(CustomerProgress.customer_id == customer_id)
            .order_by(CustomerProgress.recorded_date.desc(), CustomerProgress.created_at.desc())
            .all()
        )
        return [r.to_dict() for r in records]

    # ------------------------------------------------------------------
    # roster
    # ------------------------------------------------------------------
    @storage_call
    def deactivate_assignment(self, trainer_id, customer_id):
        link = self._active_link(trainer_id, customer_id, lock=True)
        if link is None:
            self.db.session.rollback()
            return False
        link.status = "inactive"
        link.unassigned_at = datetime.utcnow()
        self.db.session.commit()
        return True

    @storage_call
    def update_assignment_record(self, trainer_id, customer_id, changes):
        link = self._require_link_in_transaction(trainer_id, customer_id)
        for field, value in changes.items():
            setattr(link, field, value)
        self.db.session.commit()
        return link.to_customer_dict()

    # ------------------------------------------------------------------
    # meal plans
    # ------------------------------------------------------------------
    @storage_call
    def list_meal_plans(self, trainer_id):
        plans = (
            MealPlan.query.filter_by(trainer_id=trainer_id)
            .order_by(MealPlan.created_at.desc(), MealPlan.id.asc())
            .all()
        )
        return [p.to_dict() for p in plans]

    @storage_call
    def create_meal_plan(self, trainer_id, data):
        plan = MealPlan(trainer_id=trainer_id, **data)
        self.db.session.add(plan)
        self.db.session.commit()
        return plan.to_dict()

    @storage_call
    def get_meal_plan(self, trainer_id, meal_plan_id):
        plan = MealPlan.query.filter_by(id=meal_plan_id, trainer_id=trainer_id).first()
        return plan.to_dict() if plan else None

    @storage_call
    def create_meal_plan_assignments(self, trainer_id, meal_plan_id, customer_ids, start_date, notes=None):
        for customer_id in customer_ids:
            self._require_link_in_transaction(trainer_id, customer_id)

        if self._has_active_duplicate(meal_plan_id, customer_ids):
            self.db.session.rollback()
            raise ConflictError(DUPLICATE_MEAL_PLAN_ASSIGNMENT)

        assignments = [
            MealPlanAssignment(
                meal_plan_id=meal_plan_id,
                customer_id=customer_id,
                trainer_id=trainer_id,
                start_date=start_date,
                notes=notes,
                status=ACTIVE,
            )
            for customer_id in customer_ids
        ]
        self.db.session.add_all(assignments)
        try:
            self.db.session.commit()
        except IntegrityError as e:
            # a concurrent request won the partial unique index
            self.db.session.rollback()
            raise ConflictError(DUPLICATE_MEAL_PLAN_ASSIGNMENT) from e
        return [a.to_dict() for a in assignments]

    @storage_call
    def cancel_meal_plan_assignment(self, trainer_id, customer_id, assignment_id):
        self._require_link_in_transaction(trainer_id, customer_id)
        assignment = MealPlanAssignment.query.filter_by(
            id=assignment_id, customer_id=customer_id, status=ACTIVE
        ).first()
        if assignment is None:
            self.db.session.rollback()
            return None
        assignment.status = "cancelled"
        self.db.session.commit()
        return assignment.to_dict()

    # ------------------------------------------------------------------
    # progress
    # ------------------------------------------------------------------
    @storage_call
    def create_progress(self, trainer_id, customer_id, data):
        self._require_link_in_transaction(trainer_id, customer_id)
        record = CustomerProgress(customer_id=customer_id, trainer_id=trainer_id, **data)
        self.db.session.add(record)
        self.db.session.commit()
        return record.to_dict()

    # ------------------------------------------------------------------
    # invitations
    # ------------------------------------------------------------------
    @storage_call
    def get_pending_invitation(self, trainer_id, email, now):
        invitation = (
            CustomerInvitation.query
            .filter(
                CustomerInvitation.trainer_id == trainer_id,
                CustomerInvitation.customer_email == email,
                CustomerInvitation.used_at.is_(None),
                CustomerInvitation.expires_at > now,
            )
            .first()
        )
        return invitation.to_dict(now) if invitation else None

    @storage_call
    def create_invitation(self, trainer_id, email, token, expires_at, message=None):
        invitation = CustomerInvitation(
            trainer_id=trainer_id,
            customer_email=email,
            token=token,
            expires_at=expires_at,
            message=message,
        )
        self.db.session.add(invitation)
        self.db.session.commit()
        return invitation.to_dict()

    @storage_call
    def list_invitations(self, trainer_id, now):
        invitations = (
            CustomerInvitation.query.filter_by(trainer_id=trainer_id)
            .order_by(CustomerInvitation.created_at.desc(), CustomerInvitation.id.asc())
            .all()
        )
        return [i.to_dict(now) for i in invitations]

    @storage_call
    def get_invitation(self, token, now):
        invitation = CustomerInvitation.query.filter_by(token=token).first()
        return invitation.to_dict(now) if invitation else None

    @storage_call
    def get_account_by_email(self, email):
        user = User.query.filter_by(email=email).first()
        return {"id": user.id, "role": user.role} if user else None

    @storage_call
    def accept_invitation(self, token, now, customer_id=None, account=None):
        invitation = CustomerInvitation.query.filter_by(token=token).with_for_update().first()
        if invitation is None:
            self.db.session.rollback()
            raise NotFoundError(INVALID_INVITATION)
        if invitation.used_at is not None:
            self.db.session.rollback()
            raise GoneError(INVITATION_USED)
        if invitation.expires_at <= now:
            self.db.session.rollback()
            raise GoneError(INVITATION_EXPIRED)

        if account is not None:
            customer = User(
                email=invitation.customer_email,
                name=account["name"],
                role="customer",
                status="active",
            )
            customer.set_password(account["password"])
            self.db.session.add(customer)
            try:
                self.db.session.flush()
            except IntegrityError as e:
                self.db.session.rollback()
                raise ConflictError(ACCOUNT_EXISTS) from e
        else:
            customer = self.db.session.get(User, customer_id)
            if customer is None or not customer.is_customer or customer.email != invitation.customer_email:
                self.db.session.rollback()
                raise NotFoundError(INVALID_INVITATION)
            if self._has_active_trainer(customer.id):
                self.db.session.rollback()
                raise ConflictError(ALREADY_HAS_TRAINER)

        invitation.used_at = now
        invitation.customer_id = customer.id
        self.db.session.add(TrainerCustomer(
            trainer_id=invitation.trainer_id,
            customer_id=customer.id,
            status=ACTIVE,
            assigned_date=now,
        ))
        try:
            self.db.session.commit()
        except IntegrityError as e:
            # another trainer's link became active first
            self.db.session.rollback()
            raise ConflictError(ALREADY_HAS_TRAINER) from e
        return customer.to_dict()
