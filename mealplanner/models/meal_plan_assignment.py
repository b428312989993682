from datetime import datetime
from sqlalchemy import text
from mealplanner.extensions import db
from mealplanner.models.user import new_id


class MealPlanAssignment(db.Model):
    __tablename__ = "meal_plan_assignments"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    meal_plan_id = db.Column(db.String(36), db.ForeignKey("meal_plans.id"), nullable=False, index=True)
    customer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    start_date = db.Column(db.Date, nullable=False)
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('active','cancelled')"),
        default="active",
        nullable=False,
    )
    notes = db.Column(db.Text)
    assigned_at = db.Column(db.DateTime, default=datetime.utcnow)

    meal_plan = db.relationship("MealPlan", back_populates="assignments")

    __table_args__ = (
        db.Index(
            "uq_meal_plan_assignments_active",
            "meal_plan_id",
            "customer_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "mealPlanId": self.meal_plan_id,
            "mealPlanName": self.meal_plan.name if self.meal_plan else None,
            "customerId": self.customer_id,
            "trainerId": self.trainer_id,
            "startDate": self.start_date.isoformat(),
            "status": self.status,
            "notes": self.notes,
            "assignedAt": self.assigned_at.isoformat() if self.assigned_at else None,
        }
