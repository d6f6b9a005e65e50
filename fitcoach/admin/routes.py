from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy import or_

from fitcoach import db
from fitcoach.auth.routes import require_self_or_admin, roles_required
from fitcoach.errors import NotFound, ValidationError
from fitcoach.models import AdminNote, Booking, MealPreference, Notification, TrainerMealPlan, User
from fitcoach.models.user import ROLES
from fitcoach.scheduling import engine
from fitcoach.scheduling.timeutils import parse_date


admin_bp = Blueprint("admin", __name__, url_prefix="/api")


def _get_user_or_404(user_id: str) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


# --- Users ---

@admin_bp.route("/users")
@roles_required("ADMIN")
def users_index():
    q = request.args.get("q", "").strip()
    query = User.query
    if q:
        like = f"%{q.lower()}%"
        query = query.filter(or_(User.email.ilike(like), User.name.ilike(like)))
    users = query.order_by(User.created_at.desc()).all()
    return jsonify([u.to_dict(with_created=True) for u in users])


@admin_bp.route("/users/<user_id>", methods=["GET"])
@login_required
def users_get(user_id: str):
    require_self_or_admin(user_id)
    return jsonify(_get_user_or_404(user_id).to_dict())


@admin_bp.route("/users/<user_id>", methods=["PUT"])
@login_required
def users_update(user_id: str):
    require_self_or_admin(user_id)
    target = _get_user_or_404(user_id)
    data = request.get_json(silent=True) or {}

    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        target.name = name
    if "onboardingCompleted" in data:
        target.onboarding_completed = bool(data["onboardingCompleted"])
    # Role changes are admin-only; clients cannot promote themselves
    if "role" in data and current_user.is_admin:
        role = data["role"]
        if role not in ROLES:
            raise ValidationError("Invalid role")
        # Prevent demoting the last admin
        if target.role == "ADMIN" and role != "ADMIN":
            if User.query.filter_by(role="ADMIN").count() <= 1:
                raise ValidationError("You cannot demote the last admin")
        target.role = role

    db.session.commit()
    return jsonify(target.to_dict())


@admin_bp.route("/users/<user_id>", methods=["DELETE"])
@roles_required("ADMIN")
def users_delete(user_id: str):
    target = _get_user_or_404(user_id)
    if target.id == current_user.id:
        raise ValidationError("You cannot delete your own account")
    Booking.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    MealPreference.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    AdminNote.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    TrainerMealPlan.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    db.session.delete(target)
    db.session.commit()
    return jsonify({"success": True})


# --- Admin notes ---

@admin_bp.route("/admin-notes/<user_id>", methods=["GET"])
@roles_required("ADMIN")
def admin_note_get(user_id: str):
    note = AdminNote.query.filter_by(user_id=user_id).first()
    return jsonify(note.to_dict() if note else None)


@admin_bp.route("/admin-notes/<user_id>", methods=["PUT"])
@roles_required("ADMIN")
def admin_note_put(user_id: str):
    _get_user_or_404(user_id)
    data = request.get_json(silent=True) or {}
    note = AdminNote.query.filter_by(user_id=user_id).first()
    if not note:
        note = AdminNote(user_id=user_id)
        db.session.add(note)
    note.note = str(data.get("note") or "")
    db.session.commit()
    return jsonify(note.to_dict())


# --- Notifications ---

def count_recipients(target_type, date_filter=None, week_filter=False, location_id=None) -> int:
    """Audience size of a broadcast: every client, or clients with matching bookings."""
    if target_type == "all":
        return User.query.filter_by(role="CLIENT").count()

    query = db.session.query(Booking.user_id).filter(Booking.user_id.isnot(None))
    if date_filter:
        query = query.filter(Booking.date == date_filter)
    elif week_filter:
        query = query.filter(Booking.date.in_(engine.week_dates(engine.local_today())))
    if location_id:
        query = query.filter(Booking.branch_id == location_id)
    return query.distinct().count()


@admin_bp.route("/notifications", methods=["GET"])
@roles_required("ADMIN")
def notifications_index():
    notifications = Notification.query.order_by(Notification.sent_at.desc()).all()
    return jsonify([n.to_dict() for n in notifications])


@admin_bp.route("/notifications", methods=["POST"])
@roles_required("ADMIN")
def notifications_create():
    data = request.get_json(silent=True) or {}
    body = (data.get("body") or "").strip()
    if not body:
        raise ValidationError("Body is required")
    target_type = data.get("targetType") or "all"
    if target_type not in ("all", "booked"):
        raise ValidationError("targetType must be 'all' or 'booked'")
    date_filter = parse_date(data["dateFilter"]) if data.get("dateFilter") else None
    week_filter = bool(data.get("weekFilter"))
    location_id = data.get("locationId") or None

    notification = Notification(
        title=(data.get("title") or "").strip() or None,
        body=body,
        target_type=target_type,
        date_filter=date_filter,
        week_filter=week_filter,
        location_id=location_id,
        recipient_count=count_recipients(target_type, date_filter, week_filter, location_id),
    )
    db.session.add(notification)
    db.session.commit()
    return jsonify(notification.to_dict())
