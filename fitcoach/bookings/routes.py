from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from fitcoach.scheduling import engine


bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@bookings_bp.route("", methods=["GET"])
@login_required
def list_bookings():
    bookings = engine.list_bookings(
        current_user, date=request.args.get("date"), user_id=request.args.get("userId")
    )
    return jsonify([b.to_dict() for b in bookings])


@bookings_bp.route("", methods=["POST"])
@login_required
def create_booking():
    data = request.get_json(silent=True) or {}
    booking = engine.create_booking(
        current_user,
        date=data.get("date"),
        start_time=data.get("startTime"),
        branch_id=data.get("branchId"),
        branch_name=data.get("branchName"),
        manual_client_name=data.get("manualClientName"),
    )
    return jsonify(booking.to_dict())


@bookings_bp.route("/<booking_id>", methods=["DELETE"])
@login_required
def delete_booking(booking_id: str):
    engine.delete_booking(current_user, booking_id)
    return jsonify({"success": True})
