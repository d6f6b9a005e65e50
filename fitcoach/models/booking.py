import uuid
from datetime import datetime

from fitcoach import db


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = db.Column(db.String(10), nullable=False, index=True)  # YYYY-MM-DD
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)
    duration = db.Column(db.Integer, nullable=False, default=90)
    booking_type = db.Column(db.String(10), nullable=False, default="app")  # app, manual
    branch_id = db.Column(db.String(36), db.ForeignKey("locations.id"), nullable=False, index=True)
    branch_name = db.Column(db.String(120), nullable=False, default="")
    # Null for walk-ins entered by the admin
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, index=True)
    user_name = db.Column(db.String(120), nullable=True)
    manual_client_name = db.Column(db.String(120), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User")

    __table_args__ = (
        db.UniqueConstraint("date", "start_time", name="uq_booking_date_start"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "bookingType": self.booking_type,
            "branchId": self.branch_id,
            "branchName": self.branch_name,
            "userId": self.user_id,
            "userName": self.user_name,
            "manualClientName": self.manual_client_name,
            "createdAt": self.created_at.isoformat(),
        }
