import os
import sys
from datetime import datetime

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from flask_jwt_extended import create_access_token  # noqa: E402

from mealplanner import create_app  # noqa: E402
from mealplanner.extensions import db  # noqa: E402
from mealplanner.models import User, TrainerCustomer, MealPlan  # noqa: E402
from tests.fakes import InMemoryStorage  # noqa: E402


@pytest.fixture()
def app():
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def fake_storage():
    return InMemoryStorage()


@pytest.fixture()
def fake_client(fake_storage):
    """Test client whose trainer endpoints run against the in-memory storage."""
    app = create_app("testing", storage=fake_storage)
    with app.app_context():
        yield app.test_client()


def make_user(role, name=None, email=None, status="active"):
    count = User.query.count() + 1
    user = User(
        name=name or f"{role.title()} {count}",
        email=email or f"{role}{count}@example.com",
        role=role,
        status=status,
    )
    user.set_password("Secret@123")
    db.session.add(user)
    db.session.commit()
    return user


def make_link(trainer, customer, assigned_date=None, status="active"):
    link = TrainerCustomer(
        trainer_id=trainer.id,
        customer_id=customer.id,
        assigned_date=assigned_date or datetime(2024, 1, 1),
        status=status,
    )
    db.session.add(link)
    db.session.commit()
    return link


def make_meal_plan(trainer, name="High protein week"):
    plan = MealPlan(trainer_id=trainer.id, name=name, days=7, plan_data={"meals": []})
    db.session.add(plan)
    db.session.commit()
    return plan


def auth_headers(user_id, role):
    token = create_access_token(identity=str(user_id), additional_claims={"role": role})
    return {"Authorization": f"Bearer {token}"}


def headers_for(user):
    return auth_headers(user.id, user.role)
