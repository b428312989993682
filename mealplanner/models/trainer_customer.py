from datetime import datetime
from sqlalchemy import text
from mealplanner.extensions import db
from mealplanner.models.user import new_id


class TrainerCustomer(db.Model):
    """Trainer <-> customer assignment. Rows are never deleted; unassigning flips status."""
    __tablename__ = "trainer_customers"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    trainer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    customer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    assigned_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('active','inactive')"),
        default="active",
        nullable=False,
        index=True,
    )
    unassigned_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    fitness_goal = db.Column(db.String(30), nullable=True)

    trainer = db.relationship("User", foreign_keys=[trainer_id], back_populates="customer_links")
    customer = db.relationship("User", foreign_keys=[customer_id], back_populates="trainer_links")

    __table_args__ = (
        db.Index("idx_trainer_customers_trainer_status", "trainer_id", "status"),
        db.Index("idx_trainer_customers_customer_status", "customer_id", "status"),
        # one active trainer per customer
        db.Index(
            "uq_trainer_customers_active_customer",
            "customer_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    def to_customer_dict(self):
        customer = self.customer
        return {
            "id": customer.id,
            "name": customer.name,
            "email": customer.email,
            "createdAt": customer.created_at.isoformat() if customer.created_at else None,
            "assignedDate": self.assigned_date.isoformat(),
            "assignmentStatus": self.status,
            "notes": self.notes,
            "fitnessGoal": self.fitness_goal,
        }
