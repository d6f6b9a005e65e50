import json

from flask import Blueprint, jsonify, request
from flask_login import login_required

from fitcoach import db
from fitcoach.auth.routes import require_self_or_admin, roles_required
from fitcoach.errors import NotFound, ValidationError
from fitcoach.models import MealPreference, TrainerMealPlan, User
from fitcoach.models.meal_plan import FILE_TYPES


meals_bp = Blueprint("meals", __name__, url_prefix="/api")


def _require_user(user_id: str) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


@meals_bp.route("/meal-preferences/<user_id>", methods=["GET"])
@login_required
def get_meal_preference(user_id: str):
    require_self_or_admin(user_id)
    pref = MealPreference.query.filter_by(user_id=user_id).first()
    return jsonify(pref.to_dict() if pref else None)


@meals_bp.route("/meal-preferences/<user_id>", methods=["PUT"])
@login_required
def put_meal_preference(user_id: str):
    require_self_or_admin(user_id)
    _require_user(user_id)
    data = request.get_json(silent=True) or {}

    pref = MealPreference.query.filter_by(user_id=user_id).first()
    if not pref:
        pref = MealPreference(user_id=user_id)
        db.session.add(pref)

    for key, attr in (("likes", "likes"), ("dislikes", "dislikes"), ("notes", "notes")):
        if key in data:
            setattr(pref, attr, str(data[key] or ""))
    if "mealsPerDay" in data:
        try:
            meals = int(data["mealsPerDay"])
        except (TypeError, ValueError):
            raise ValidationError("mealsPerDay must be a number")
        if not 1 <= meals <= 10:
            raise ValidationError("mealsPerDay must be between 1 and 10")
        pref.meals_per_day = meals
    if "goals" in data:
        goals = data["goals"]
        # Older clients send the list already JSON-encoded
        if isinstance(goals, str):
            try:
                goals = json.loads(goals or "[]")
            except ValueError:
                raise ValidationError("goals must be a list")
        if not isinstance(goals, list):
            raise ValidationError("goals must be a list")
        pref.goals = json.dumps([str(g) for g in goals])

    db.session.commit()
    return jsonify(pref.to_dict())


@meals_bp.route("/meal-plans/<user_id>", methods=["GET"])
@login_required
def get_meal_plan(user_id: str):
    require_self_or_admin(user_id)
    plan = TrainerMealPlan.query.filter_by(user_id=user_id).first()
    return jsonify(plan.to_dict() if plan else None)


@meals_bp.route("/meal-plans/<user_id>", methods=["PUT"])
@roles_required("ADMIN")
def put_meal_plan(user_id: str):
    _require_user(user_id)
    data = request.get_json(silent=True) or {}
    content = data.get("content")
    if not content:
        raise ValidationError("Content is required")
    file_type = data.get("fileType") or "text"
    if file_type not in FILE_TYPES:
        raise ValidationError(f"fileType must be one of {', '.join(FILE_TYPES)}")

    plan = TrainerMealPlan.query.filter_by(user_id=user_id).first()
    if not plan:
        plan = TrainerMealPlan(user_id=user_id, content=content)
        db.session.add(plan)
    plan.content = content
    plan.file_type = file_type
    plan.file_name = data.get("fileName")
    db.session.commit()
    return jsonify(plan.to_dict())
