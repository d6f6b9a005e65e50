import json
import uuid
from datetime import datetime

from fitcoach import db


class MealPreference(db.Model):
    __tablename__ = "meal_preferences"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, unique=True)
    likes = db.Column(db.Text, nullable=False, default="")
    dislikes = db.Column(db.Text, nullable=False, default="")
    meals_per_day = db.Column(db.Integer, nullable=False, default=3)
    # JSON string list, e.g. ["weight_loss", "muscle"]
    goals = db.Column(db.Text, nullable=False, default="[]")
    notes = db.Column(db.Text, nullable=False, default="")
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        try:
            goals = json.loads(self.goals or "[]")
        except ValueError:
            goals = []
        return {
            "id": self.id,
            "userId": self.user_id,
            "likes": self.likes,
            "dislikes": self.dislikes,
            "mealsPerDay": self.meals_per_day,
            "goals": goals,
            "notes": self.notes,
            "updatedAt": self.updated_at.isoformat(),
        }
