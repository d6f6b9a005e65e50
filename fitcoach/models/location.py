import uuid
from datetime import datetime

from fitcoach import db


class Location(db.Model):
    __tablename__ = "locations"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(120), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    # Soft delete: blocks and bookings keep pointing at inactive branches
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
        }
