from functools import wraps

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from fitcoach import db
from fitcoach.auth.tokens import issue_token
from fitcoach.errors import Forbidden, ValidationError
from fitcoach.models import User


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

MIN_PASSWORD_LENGTH = 4


def roles_required(*roles):
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapped(*args, **kwargs):
            if current_user.role not in roles:
                raise Forbidden("Admin access only" if roles == ("ADMIN",) else None)
            return view(*args, **kwargs)

        return wrapped

    return decorator


def require_self_or_admin(user_id: str) -> None:
    if not current_user.is_admin and current_user.id != user_id:
        raise Forbidden()


def _auth_response(user: User):
    return jsonify({"token": issue_token(user), "user": user.to_dict()})


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not name or not email or not password:
        raise ValidationError("Name, email and password are required")
    if "@" not in email:
        raise ValidationError("Invalid email")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if User.query.filter_by(email=email).first():
        raise ValidationError("Email is already registered")

    # First registered user becomes admin (the coach); everyone else is a client
    first = User.query.count() == 0
    user = User(name=name, email=email, role=("ADMIN" if first else "CLIENT"))
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return _auth_response(user)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid email or password"}), 401
    return _auth_response(user)


@auth_bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
