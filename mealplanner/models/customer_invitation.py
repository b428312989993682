from datetime import datetime
from mealplanner.extensions import db
from mealplanner.models.user import new_id


class CustomerInvitation(db.Model):
    """Trainer invitation to a customer email. Accepting it creates the active link."""
    __tablename__ = "customer_invitations"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    trainer_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_email = db.Column(db.String(255), nullable=False, index=True)
    token = db.Column(db.String(128), unique=True, nullable=False)
    message = db.Column(db.String(500))
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime)
    customer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    trainer = db.relationship("User", foreign_keys=[trainer_id])

    def status_at(self, now):
        if self.used_at is not None:
            return "accepted"
        if self.expires_at <= now:
            return "expired"
        return "pending"

    def to_dict(self, now=None):
        return {
            "id": self.id,
            "trainerId": self.trainer_id,
            "trainerName": self.trainer.name if self.trainer else None,
            "customerEmail": self.customer_email,
            "message": self.message,
            "status": self.status_at(now or datetime.utcnow()),
            "expiresAt": self.expires_at.isoformat(),
            "usedAt": self.used_at.isoformat() if self.used_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
