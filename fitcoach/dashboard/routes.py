from flask import Blueprint, jsonify

from fitcoach.auth.routes import roles_required
from fitcoach.models import Booking, User
from fitcoach.scheduling import engine


dash_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dash_bp.route("/stats")
@roles_required("ADMIN")
def stats():
    today = engine.local_today()
    return jsonify({
        "clientsCount": User.query.filter_by(role="CLIENT").count(),
        "todayBookings": Booking.query.filter_by(date=today).count(),
        "availableSlots": engine.count_open_slots_from(today),
    })
