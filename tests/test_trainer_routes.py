from datetime import datetime, timedelta

from flask_jwt_extended import create_access_token

from mealplanner.extensions import db
from mealplanner.models import CustomerProgress, MealPlanAssignment, TrainerCustomer
from tests.conftest import auth_headers, headers_for, make_link, make_meal_plan, make_user

NOT_FOUND = {"success": False, "error": "Customer not found or not assigned to you"}
TRAINER_REQUIRED = {"success": False, "error": "Access denied: Trainer role required"}


def roster():
    trainer = make_user("trainer")
    own = make_user("customer")
    other_trainer = make_user("trainer")
    foreign = make_user("customer")
    make_link(trainer, own)
    make_link(other_trainer, foreign)
    return trainer, own, foreign


class TestCustomerList:

    def test_lists_only_active_own_customers(self, client):
        trainer, own, foreign = roster()
        former = make_user("customer")
        make_link(trainer, former, status="inactive")

        resp = client.get("/trainers/customers", headers=headers_for(trainer))
        data = resp.get_json()

        assert resp.status_code == 200
        assert data["success"] is True
        assert data["total"] == 1
        assert [c["id"] for c in data["customers"]] == [own.id]
        assert data["customers"][0]["assignmentStatus"] == "active"

    def test_newest_assignment_first(self, client):
        trainer = make_user("trainer")
        older = make_user("customer")
        newer = make_user("customer")
        make_link(trainer, older, assigned_date=datetime(2024, 1, 1))
        make_link(trainer, newer, assigned_date=datetime(2024, 3, 1))

        data = client.get("/trainers/customers", headers=headers_for(trainer)).get_json()
        assert [c["id"] for c in data["customers"]] == [newer.id, older.id]

    def test_pagination(self, client):
        trainer = make_user("trainer")
        start = datetime(2024, 1, 1)
        for day in range(5):
            make_link(trainer, make_user("customer"), assigned_date=start + timedelta(days=day))

        data = client.get("/trainers/customers?offset=1&limit=2", headers=headers_for(trainer)).get_json()
        assert data["total"] == 5
        assert len(data["customers"]) == 2

    def test_invalid_pagination(self, client):
        trainer = make_user("trainer")
        resp = client.get("/trainers/customers?offset=-1&limit=abc", headers=headers_for(trainer))
        data = resp.get_json()
        assert resp.status_code == 400
        assert data["success"] is False
        assert len(data["errors"]) == 2

    def test_listing_is_cached_until_roster_changes(self, client):
        trainer, own, _ = roster()
        headers = headers_for(trainer)
        assert client.get("/trainers/customers", headers=headers).get_json()["total"] == 1

        # Direct write bypasses the service so the cached page is still served.
        newcomer = make_user("customer")
        make_link(trainer, newcomer)
        assert client.get("/trainers/customers", headers=headers).get_json()["total"] == 1

        client.delete(f"/trainers/customers/{own.id}", headers=headers)
        data = client.get("/trainers/customers", headers=headers).get_json()
        assert [c["id"] for c in data["customers"]] == [newcomer.id]


class TestRoleGate:

    def test_customer_token_is_rejected(self, client):
        customer = make_user("customer")
        resp = client.get("/trainers/customers", headers=headers_for(customer))
        assert resp.status_code == 403
        assert resp.get_json() == TRAINER_REQUIRED

    def test_missing_token_is_rejected(self, client):
        resp = client.get("/trainers/customers")
        assert resp.status_code == 403
        assert resp.get_json() == TRAINER_REQUIRED

    def test_garbage_token_is_rejected(self, client):
        resp = client.get("/trainers/customers", headers={"Authorization": "Bearer not.a.token"})
        assert resp.status_code == 403
        assert resp.get_json() == TRAINER_REQUIRED

    def test_expired_token_is_rejected(self, client):
        trainer = make_user("trainer")
        token = create_access_token(
            identity=trainer.id,
            additional_claims={"role": "trainer"},
            expires_delta=timedelta(seconds=-1),
        )
        resp = client.get("/trainers/customers", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403

    def test_token_without_role_is_rejected(self, client):
        trainer = make_user("trainer")
        token = create_access_token(identity=trainer.id)
        resp = client.get("/trainers/customers", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403

    def test_non_trainer_never_touches_storage(self, fake_client, fake_storage):
        customer = fake_storage.add_user("customer")
        resp = fake_client.put(
            f"/trainers/customers/{customer}/progress",
            json={"weight": 70},
            headers=auth_headers(customer, "customer"),
        )
        assert resp.status_code == 403
        assert fake_storage.calls == []


class TestAntiEnumeration:

    def test_unowned_and_missing_customers_look_identical(self, client):
        trainer, _, foreign = roster()
        headers = headers_for(trainer)

        unowned = client.get(f"/trainers/customers/{foreign.id}", headers=headers)
        missing = client.get("/trainers/customers/00000000-0000-0000-0000-000000000000", headers=headers)

        assert unowned.status_code == missing.status_code == 404
        assert unowned.get_json() == missing.get_json() == NOT_FOUND

    def test_injection_shaped_id_is_just_not_found(self, client):
        trainer, _, _ = roster()
        resp = client.get(
            "/trainers/customers/1%27%20OR%20%271%27%3D%271", headers=headers_for(trainer)
        )
        assert resp.status_code == 404
        assert resp.get_json() == NOT_FOUND
        assert TrainerCustomer.query.count() == 2

    def test_other_trainers_customer_views_are_hidden(self, client):
        trainer, _, foreign = roster()
        headers = headers_for(trainer)
        for path in ("meal-plans", "progress"):
            resp = client.get(f"/trainers/customers/{foreign.id}/{path}", headers=headers)
            assert resp.status_code == 404
            assert resp.get_json() == NOT_FOUND

    def test_own_customer_detail(self, client):
        trainer, own, _ = roster()
        resp = client.get(f"/trainers/customers/{own.id}", headers=headers_for(trainer))
        data = resp.get_json()
        assert resp.status_code == 200
        assert data["customer"]["id"] == own.id
        assert data["customer"]["email"] == own.email


class TestProgress:

    def test_record_progress_for_own_customer(self, client):
        trainer, own, _ = roster()
        resp = client.put(
            f"/trainers/customers/{own.id}/progress",
            json={"weight": 75.5, "measurements": {"waist": 82}, "recordedDate": "2024-05-01"},
            headers=headers_for(trainer),
        )
        data = resp.get_json()

        assert resp.status_code == 200
        assert data["message"] == "Progress updated successfully"
        assert data["progress"]["weight"] == 75.5
        assert data["progress"]["recordedDate"] == "2024-05-01"

        listed = client.get(f"/trainers/customers/{own.id}/progress", headers=headers_for(trainer)).get_json()
        assert len(listed["progress"]) == 1

    def test_every_validation_error_is_reported(self, client):
        trainer, own, _ = roster()
        resp = client.put(
            f"/trainers/customers/{own.id}/progress",
            json={"weight": -50, "measurements": {"waist": "invalid"}},
            headers=headers_for(trainer),
        )
        data = resp.get_json()

        assert resp.status_code == 400
        assert data["success"] is False
        assert len(data["errors"]) >= 2
        assert any("Weight" in e for e in data["errors"])
        assert any("Measurement" in e for e in data["errors"])
        assert CustomerProgress.query.count() == 0

    def test_numeric_string_weight_is_rejected(self, client):
        trainer, own, _ = roster()
        resp = client.put(
            f"/trainers/customers/{own.id}/progress",
            json={"weight": "70"},
            headers=headers_for(trainer),
        )
        assert resp.status_code == 400
        assert resp.get_json()["errors"] == ["Weight must be a positive number between 1 and 300 kg"]
        assert CustomerProgress.query.count() == 0

    def test_unowned_customer_progress_write(self, client):
        trainer, _, foreign = roster()
        resp = client.put(
            f"/trainers/customers/{foreign.id}/progress",
            json={"weight": 70},
            headers=headers_for(trainer),
        )
        assert resp.status_code == 404
        assert resp.get_json() == NOT_FOUND
        assert CustomerProgress.query.count() == 0


class TestMealPlans:

    def test_create_and_list_library(self, client):
        trainer = make_user("trainer")
        headers = headers_for(trainer)
        resp = client.post(
            "/trainers/meal-plans",
            json={"name": "Lean bulk", "days": 14, "planData": {"meals": []}},
            headers=headers,
        )
        assert resp.status_code == 201
        assert resp.get_json()["mealPlan"]["name"] == "Lean bulk"

        plans = client.get("/trainers/meal-plans", headers=headers).get_json()["mealPlans"]
        assert [p["name"] for p in plans] == ["Lean bulk"]

    def test_assign_to_own_customer(self, client):
        trainer, own, _ = roster()
        plan = make_meal_plan(trainer)
        resp = client.post(
            f"/trainers/customers/{own.id}/meal-plans",
            json={"mealPlanId": plan.id, "startDate": "2024-06-01"},
            headers=headers_for(trainer),
        )
        data = resp.get_json()

        assert resp.status_code == 200
        assert data["message"] == "Meal plan assigned successfully"
        assert data["assignment"]["mealPlanId"] == plan.id
        assert MealPlanAssignment.query.count() == 1

    def test_assign_to_unowned_customer_writes_nothing(self, client):
        trainer, _, foreign = roster()
        plan = make_meal_plan(trainer)
        resp = client.post(
            f"/trainers/customers/{foreign.id}/meal-plans",
            json={"mealPlanId": plan.id, "startDate": "2024-06-01"},
            headers=headers_for(trainer),
        )
        assert resp.status_code == 404
        assert resp.get_json() == NOT_FOUND
        assert MealPlanAssignment.query.count() == 0

    def test_duplicate_assignment_conflicts(self, client):
        trainer, own, _ = roster()
        plan = make_meal_plan(trainer)
        payload = {"mealPlanId": plan.id, "startDate": "2024-06-01"}
        headers = headers_for(trainer)

        assert client.post(f"/trainers/customers/{own.id}/meal-plans", json=payload, headers=headers).status_code == 200
        resp = client.post(f"/trainers/customers/{own.id}/meal-plans", json=payload, headers=headers)
        assert resp.status_code == 409
        assert MealPlanAssignment.query.count() == 1

    def test_missing_fields_are_all_reported(self, client):
        trainer, own, _ = roster()
        resp = client.post(f"/trainers/customers/{own.id}/meal-plans", json={}, headers=headers_for(trainer))
        assert resp.status_code == 400
        assert len(resp.get_json()["errors"]) == 2

    def test_remove_assignment(self, client):
        trainer, own, _ = roster()
        plan = make_meal_plan(trainer)
        headers = headers_for(trainer)
        created = client.post(
            f"/trainers/customers/{own.id}/meal-plans",
            json={"mealPlanId": plan.id, "startDate": "2024-06-01"},
            headers=headers,
        ).get_json()["assignment"]

        resp = client.delete(f"/trainers/customers/{own.id}/meal-plans/{created['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()["assignment"]["status"] == "cancelled"
        assert db.session.get(MealPlanAssignment, created["id"]).status == "cancelled"

        listed = client.get(f"/trainers/customers/{own.id}/meal-plans", headers=headers).get_json()
        assert [a["status"] for a in listed["assignments"]] == ["cancelled"]

    def test_bulk_assignment_with_unowned_target_is_forbidden(self, client):
        trainer, own, foreign = roster()
        plan = make_meal_plan(trainer)
        resp = client.post(
            f"/trainers/meal-plans/{plan.id}/assignments",
            json={"customerIds": [own.id, foreign.id], "startDate": "2024-06-01"},
            headers=headers_for(trainer),
        )
        assert resp.status_code == 403
        assert resp.get_json()["success"] is False
        assert MealPlanAssignment.query.count() == 0

    def test_bulk_assignment_to_own_customers(self, client):
        trainer, own, _ = roster()
        second = make_user("customer")
        make_link(trainer, second)
        plan = make_meal_plan(trainer)
        resp = client.post(
            f"/trainers/meal-plans/{plan.id}/assignments",
            json={"customerIds": [own.id, second.id], "startDate": "2024-06-01"},
            headers=headers_for(trainer),
        )
        assert resp.status_code == 201
        assert len(resp.get_json()["assignments"]) == 2
        assert MealPlanAssignment.query.count() == 2


class TestRoster:

    def test_trainer_cannot_add_a_customer_by_id(self, client):
        trainer = make_user("trainer")
        stranger = make_user("customer")
        headers = headers_for(trainer)

        resp = client.post(f"/trainers/customers/{stranger.id}/assign", headers=headers)
        assert resp.status_code == 404
        assert TrainerCustomer.query.count() == 0
        assert client.get(f"/trainers/customers/{stranger.id}", headers=headers).status_code == 404

    def test_unassign_keeps_the_row(self, client):
        trainer, own, _ = roster()
        headers = headers_for(trainer)
        resp = client.delete(f"/trainers/customers/{own.id}", headers=headers)
        assert resp.status_code == 200

        link = TrainerCustomer.query.filter_by(trainer_id=trainer.id, customer_id=own.id).one()
        assert link.status == "inactive"
        assert client.get(f"/trainers/customers/{own.id}", headers=headers).status_code == 404

    def test_unassign_unowned_customer(self, client):
        trainer, _, foreign = roster()
        resp = client.delete(f"/trainers/customers/{foreign.id}", headers=headers_for(trainer))
        assert resp.status_code == 404
        assert TrainerCustomer.query.filter_by(customer_id=foreign.id).one().status == "active"

    def test_update_customer_record(self, client):
        trainer, own, _ = roster()
        resp = client.patch(
            f"/trainers/customers/{own.id}",
            json={"notes": "Knee injury", "fitnessGoal": "maintenance"},
            headers=headers_for(trainer),
        )
        data = resp.get_json()
        assert resp.status_code == 200
        assert data["customer"]["notes"] == "Knee injury"
        assert data["customer"]["fitnessGoal"] == "maintenance"

    def test_update_customer_record_rejects_unknown_goal(self, client):
        trainer, own, _ = roster()
        resp = client.patch(
            f"/trainers/customers/{own.id}",
            json={"fitnessGoal": "fly"},
            headers=headers_for(trainer),
        )
        assert resp.status_code == 400


class TestStorageFailures:

    def test_failure_message_is_generic(self, fake_client, fake_storage):
        trainer = fake_storage.add_user("trainer")
        fake_storage.fail_with = "connection refused: db.internal:5432"

        resp = fake_client.get("/trainers/customers", headers=auth_headers(trainer, "trainer"))
        assert resp.status_code == 500
        assert resp.get_json() == {"success": False, "error": "Failed to retrieve customers"}
        assert b"db.internal" not in resp.data

    def test_write_failure_message_is_generic(self, fake_client, fake_storage):
        trainer = fake_storage.add_user("trainer")
        customer = fake_storage.add_user("customer")
        fake_storage.add_link(trainer, customer)
        fake_storage.fail_with = "deadlock detected"

        resp = fake_client.put(
            f"/trainers/customers/{customer}/progress",
            json={"weight": 70},
            headers=auth_headers(trainer, "trainer"),
        )
        assert resp.status_code == 500
        assert resp.get_json() == {"success": False, "error": "Failed to update progress"}


class TestRateLimit:

    def test_request_over_the_window_is_rejected(self, client):
        trainer = make_user("trainer")
        headers = headers_for(trainer)

        statuses = [client.get("/trainers/customers", headers=headers).status_code for _ in range(100)]
        assert statuses == [200] * 100

        resp = client.get("/trainers/customers", headers=headers)
        assert resp.status_code == 429
        assert resp.get_json() == {"success": False, "error": "Rate limit exceeded. Please try again later."}

    def test_limit_is_per_caller(self, client):
        first = make_user("trainer")
        second = make_user("trainer")
        for _ in range(100):
            client.get("/trainers/customers", headers=headers_for(first))

        assert client.get("/trainers/customers", headers=headers_for(first)).status_code == 429
        assert client.get("/trainers/customers", headers=headers_for(second)).status_code == 200
