from datetime import datetime
from mealplanner.extensions import db
from mealplanner.models.user import new_id


class MealPlan(db.Model):
    __tablename__ = "meal_plans"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    trainer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    days = db.Column(db.Integer, default=7)
    plan_data = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    trainer = db.relationship("User", back_populates="meal_plans")
    assignments = db.relationship("MealPlanAssignment", back_populates="meal_plan", lazy="dynamic")

    def to_dict(self):
        return {
            "id": self.id,
            "trainerId": self.trainer_id,
            "name": self.name,
            "description": self.description,
            "days": self.days,
            "planData": self.plan_data or {},
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
