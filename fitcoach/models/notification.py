import uuid
from datetime import datetime

from fitcoach import db


class Notification(db.Model):
    """Record of an admin broadcast. Only the audience size is stored."""
    __tablename__ = "notifications"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(200), nullable=True)
    body = db.Column(db.Text, nullable=False)
    target_type = db.Column(db.String(10), nullable=False, default="all")  # all, booked
    date_filter = db.Column(db.String(10), nullable=True)
    week_filter = db.Column(db.Boolean, nullable=False, default=False)
    location_id = db.Column(db.String(36), nullable=True)
    sent_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    recipient_count = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "targetType": self.target_type,
            "dateFilter": self.date_filter,
            "weekFilter": self.week_filter,
            "locationId": self.location_id,
            "sentAt": self.sent_at.isoformat(),
            "recipientCount": self.recipient_count,
        }
