import uuid
from datetime import datetime

from fitcoach import db


class AvailabilityBlock(db.Model):
    __tablename__ = "availability_blocks"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = db.Column(db.String(10), nullable=False, index=True)  # YYYY-MM-DD
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)
    branch_id = db.Column(db.String(36), db.ForeignKey("locations.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    location = db.relationship("Location")

    __table_args__ = (
        db.CheckConstraint("end_time > start_time", name="ck_block_end_after_start"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "branchId": self.branch_id,
            "createdAt": self.created_at.isoformat(),
        }
