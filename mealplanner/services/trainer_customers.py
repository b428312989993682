import logging
from datetime import date
from functools import wraps

from mealplanner.access.context import require_trainer
from mealplanner.access.errors import OwnershipError, StorageError
from mealplanner.access.guard import MutationGuard
from mealplanner.access import scoped
from mealplanner.schemas import load_or_raise
from mealplanner.schemas.customer import CustomerRecordUpdateSchema, PaginationSchema
from mealplanner.schemas.meal_plan import (
    BulkMealPlanAssignSchema, MealPlanAssignSchema, MealPlanCreateSchema,
)
from mealplanner.schemas.progress import ProgressUpdateSchema

logger = logging.getLogger(__name__)

MEAL_PLAN_NOT_FOUND = "Meal plan not found"
BULK_NOT_OWNED = "Cannot assign meal plan: one or more customers are not assigned to you"

progress_schema = ProgressUpdateSchema()
meal_plan_create_schema = MealPlanCreateSchema()
meal_plan_assign_schema = MealPlanAssignSchema()
bulk_assign_schema = BulkMealPlanAssignSchema()
customer_record_schema = CustomerRecordUpdateSchema()
pagination_schema = PaginationSchema()


def on_storage_failure(public_message):
    """Give a StorageError raised below this call a client-safe message."""
    def decorator(method):
        @wraps(method)
        def wrapper(*args, **kwargs):
            try:
                return method(*args, **kwargs)
            except StorageError as e:
                e.public_message = public_message
                raise
        return wrapper
    return decorator


def customer_list_prefix(trainer_id):
    return f"trainer:{trainer_id}:customers"


class TrainerCustomerService:
    """Trainer-side operations on customers, meal plan assignments and progress.

    Every method takes the caller's ``UserContext`` explicitly and raises a
    ``TrainerAccessError`` subclass on any failed precondition.
    """

    def __init__(self, storage, cache, cache_ttl=300, max_page_size=100):
        self.storage = storage
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.max_page_size = max_page_size
        self.guard = MutationGuard(storage)

    # ------------------------------------------------------------------
    # cache helpers
    # ------------------------------------------------------------------
    def _cached(self, key):
        try:
            return self.cache.get(key)
        except Exception as e:
            logger.warning(f"Customer list cache read failed for {key}: {e}")
            return None

    def _store(self, key, value):
        try:
            self.cache.set(key, value, self.cache_ttl)
        except Exception as e:
            logger.warning(f"Customer list cache write failed for {key}: {e}")

    def _invalidate_customer_list(self, trainer_id):
        try:
            self.cache.delete_prefix(customer_list_prefix(trainer_id))
        except Exception as e:
            logger.error(f"Customer list cache invalidation failed for trainer {trainer_id}: {e}")

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    @on_storage_failure("Failed to retrieve customers")
    def list_customers(self, user, params=None):
        user = require_trainer(user)
        page = load_or_raise(pagination_schema, params or {})
        limit = min(page["limit"], self.max_page_size)

        key = f"{customer_list_prefix(user.id)}:{page['offset']}:{limit}"
        result = self._cached(key)
        if result is None:
            result = scoped.list_owned_customers(self.storage, user.id, page["offset"], limit)
            self._store(key, result)
        return result

    @on_storage_failure("Failed to retrieve customer")
    def get_customer(self, user, customer_id):
        user = require_trainer(user)
        customer = scoped.get_owned_customer(self.storage, user.id, customer_id)
        if customer is None:
            raise OwnershipError()
        return customer

    @on_storage_failure("Failed to retrieve meal plan assignments")
    def list_meal_plan_assignments(self, user, customer_id):
        user = require_trainer(user)
        assignments = scoped.list_owned_meal_plan_assignments(self.storage, user.id, customer_id)
        if assignments is None:
            raise OwnershipError()
        return assignments

    @on_storage_failure("Failed to retrieve progress")
    def list_progress(self, user, customer_id):
        user = require_trainer(user)
        progress = scoped.list_owned_progress(self.storage, user.id, customer_id)
        if progress is None:
            raise OwnershipError()
        return progress

    @on_storage_failure("Failed to retrieve meal plans")
    def list_meal_plans(self, user):
        user = require_trainer(user)
        return self.storage.list_meal_plans(user.id)

    # ------------------------------------------------------------------
    # roster
    # ------------------------------------------------------------------
    @on_storage_failure("Failed to unassign customer")
    def unassign_customer(self, user, customer_id):
        def write(_):
            if not self.storage.deactivate_assignment(user.id, customer_id):
                raise OwnershipError()
            self._invalidate_customer_list(user.id)
            logger.info(f"Trainer {user.id} unassigned customer {customer_id}")
            return True

        return self.guard.run(user, customer_id, write)

    @on_storage_failure("Failed to update customer")
    def update_customer_record(self, user, customer_id, payload):
        def write(data):
            customer = self.storage.update_assignment_record(user.id, customer_id, data)
            self._invalidate_customer_list(user.id)
            return customer

        return self.guard.run(user, customer_id, write, customer_record_schema, payload)

    # ------------------------------------------------------------------
    # meal plans
    # ------------------------------------------------------------------
    @on_storage_failure("Failed to create meal plan")
    def create_meal_plan(self, user, payload):
        user = require_trainer(user)
        data = load_or_raise(meal_plan_create_schema, payload)
        return self.storage.create_meal_plan(user.id, data)

    def _owned_meal_plan(self, trainer_id, meal_plan_id):
        plan = self.storage.get_meal_plan(trainer_id, meal_plan_id)
        if plan is None:
            raise OwnershipError(MEAL_PLAN_NOT_FOUND)
        return plan

    @on_storage_failure("Failed to assign meal plan")
    def assign_meal_plan(self, user, customer_id, payload):
        def write(data):
            self._owned_meal_plan(user.id, data["meal_plan_id"])
            assignments = self.storage.create_meal_plan_assignments(
                user.id, data["meal_plan_id"], [customer_id], data["start_date"], data.get("notes")
            )
            return assignments[0]

        return self.guard.run(user, customer_id, write, meal_plan_assign_schema, payload)

    @on_storage_failure("Failed to assign meal plan")
    def assign_meal_plan_to_customers(self, user, meal_plan_id, payload):
        user = require_trainer(user)
        data = load_or_raise(bulk_assign_schema, payload)
        customer_ids = list(dict.fromkeys(data["customer_ids"]))
        self._owned_meal_plan(user.id, meal_plan_id)

        def write():
            try:
                return self.storage.create_meal_plan_assignments(
                    user.id, meal_plan_id, customer_ids, data["start_date"], data.get("notes")
                )
            except OwnershipError as e:
                raise OwnershipError(BULK_NOT_OWNED, collection=True) from e

        return self.guard.run_for_all(user, customer_ids, write, BULK_NOT_OWNED)

    @on_storage_failure("Failed to remove meal plan assignment")
    def cancel_meal_plan_assignment(self, user, customer_id, assignment_id):
        def write(_):
            assignment = self.storage.cancel_meal_plan_assignment(user.id, customer_id, assignment_id)
            if assignment is None:
                raise OwnershipError("Meal plan assignment not found")
            return assignment

        return self.guard.run(user, customer_id, write)

    # ------------------------------------------------------------------
    # progress
    # ------------------------------------------------------------------
    @on_storage_failure("Failed to update progress")
    def update_progress(self, user, customer_id, payload):
        def write(data):
            if data.get("recorded_date") is None:
                data["recorded_date"] = date.today()
            return self.storage.create_progress(user.id, customer_id, data)

        return self.guard.run(user, customer_id, write, progress_schema, payload)
