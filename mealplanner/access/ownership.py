def is_owner(storage, trainer_id, customer_id):
    """True iff an active assignment links ``trainer_id`` to ``customer_id``.

    Pure read. Blank identifiers deny without a storage round trip, and
    storage failures propagate so callers can only fail closed.
    """
    if not trainer_id or not customer_id:
        return False
    if not isinstance(trainer_id, str) or not isinstance(customer_id, str):
        return False
    return bool(storage.has_active_assignment(trainer_id, customer_id))
