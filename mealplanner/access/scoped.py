"""Trainer-scoped reads. Every result is joined through the caller's active assignments."""


def list_owned_customers(storage, trainer_id, offset=0, limit=50):
    customers, total = storage.list_customers_for_trainer(trainer_id, offset, limit)
    return {"customers": list(customers), "total": total}


def get_owned_customer(storage, trainer_id, customer_id):
    """Customer record or None when the caller holds no active assignment to it."""
    if not trainer_id or not customer_id:
        return None
    return storage.get_customer_for_trainer(trainer_id, customer_id)


def list_owned_meal_plan_assignments(storage, trainer_id, customer_id):
    if get_owned_customer(storage, trainer_id, customer_id) is None:
        return None
    return storage.list_meal_plan_assignments(trainer_id, customer_id)


def list_owned_progress(storage, trainer_id, customer_id):
    if get_owned_customer(storage, trainer_id, customer_id) is None:
        return None
    return storage.list_progress(trainer_id, customer_id)
