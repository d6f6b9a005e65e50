import uuid
from datetime import datetime

from fitcoach import db

FILE_TYPES = ("pdf", "text")


class TrainerMealPlan(db.Model):
    __tablename__ = "trainer_meal_plans"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, unique=True)
    content = db.Column(db.Text, nullable=False)
    file_type = db.Column(db.String(10), nullable=False, default="text")  # pdf, text
    file_name = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "content": self.content,
            "fileType": self.file_type,
            "fileName": self.file_name,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
