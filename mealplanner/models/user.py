import uuid
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from mealplanner.extensions import db

USERS_TABLE = "users"


def new_id():
    return str(uuid.uuid4())


class User(db.Model):
    __tablename__ = USERS_TABLE

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.String(20),
        db.CheckConstraint("role IN ('admin','trainer','customer')"),
        nullable=False,
        index=True,
    )
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('pending','active','suspended')"),
        default="active",
        index=True,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Trainer <-> Customer links (ownership / roster)
    customer_links = db.relationship("TrainerCustomer", foreign_keys="[TrainerCustomer.trainer_id]", back_populates="trainer", lazy="dynamic")
    trainer_links = db.relationship("TrainerCustomer", foreign_keys="[TrainerCustomer.customer_id]", back_populates="customer", lazy="dynamic")

    meal_plans = db.relationship("MealPlan", back_populates="trainer", lazy="dynamic")

    # Helpers
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    # ------- helper properties -------
    @property
    def is_admin(self):
        return self.role == "admin"

    @property
    def is_trainer(self):
        return self.role == "trainer"

    @property
    def is_customer(self):
        return self.role == "customer"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
