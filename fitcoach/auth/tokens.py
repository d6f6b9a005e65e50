"""Bearer tokens for the REST API, wired into Flask-Login's request loader."""
from typing import Optional

from flask import current_app, jsonify
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from fitcoach import db, login_manager
from fitcoach.models import User

TOKEN_SALT = "fitcoach-auth"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(user: User) -> str:
    return _serializer().dumps({"id": user.id})


def user_from_token(token: str) -> Optional[User]:
    try:
        data = _serializer().loads(token, max_age=current_app.config["TOKEN_MAX_AGE_SECONDS"])
    except (SignatureExpired, BadSignature):
        return None
    return db.session.get(User, data.get("id"))


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, user_id)


@login_manager.request_loader
def load_user_from_request(request):
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return user_from_token(token.strip())


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": "Authentication required"}), 401
