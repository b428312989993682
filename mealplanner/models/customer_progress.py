from datetime import datetime
from mealplanner.extensions import db
from mealplanner.models.user import new_id


class CustomerProgress(db.Model):
    """Append-only weight and measurement log recorded by a customer's trainer."""
    __tablename__ = 'customer_progress'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    customer_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    trainer_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    recorded_date = db.Column(db.Date, nullable=False, default=lambda: datetime.utcnow().date())

    weight_kg = db.Column(db.Float, nullable=False)
    measurements = db.Column(db.JSON)  # centimetres, keyed by body site
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'customerId': self.customer_id,
            'trainerId': self.trainer_id,
            'recordedDate': self.recorded_date.isoformat(),
            'weight': self.weight_kg,
            'measurements': self.measurements or {},
            'notes': self.notes,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
