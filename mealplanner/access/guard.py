from mealplanner.access.context import require_trainer
from mealplanner.access.errors import OwnershipError
from mealplanner.access.ownership import is_owner
from mealplanner.schemas import load_or_raise


class MutationGuard:
    """Precondition chain for every trainer write against a customer.

    role -> ownership -> payload validation -> write. Each stage ends the
    request on failure and nothing is remembered between calls, so a trainer
    whose assignment is revoked loses write access on the next request.
    """

    def __init__(self, storage):
        self.storage = storage

    def run(self, user, customer_id, write, schema=None, payload=None):
        user = require_trainer(user)
        if not is_owner(self.storage, user.id, customer_id):
            raise OwnershipError()
        data = load_or_raise(schema, payload) if schema is not None else {}
        return write(data)

    def run_for_all(self, user, customer_ids, write, message):
        """Collection variant: every target must be owned or nothing is written.

        The targets come from an already validated payload.
        """
        user = require_trainer(user)
        for customer_id in customer_ids:
            if not is_owner(self.storage, user.id, customer_id):
                raise OwnershipError(message, collection=True)
        return write()
