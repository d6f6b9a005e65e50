from flask import Blueprint, jsonify, request

from fitcoach.auth.routes import roles_required
from fitcoach.errors import ValidationError
from fitcoach.scheduling import engine


availability_bp = Blueprint("availability", __name__, url_prefix="/api/availability")


@availability_bp.route("", methods=["GET"])
def list_blocks():
    blocks = engine.get_blocks(request.args.get("date"), request.args.get("branchId"))
    return jsonify([b.to_dict() for b in blocks])


@availability_bp.route("", methods=["POST"])
@roles_required("ADMIN")
def create_block():
    data = request.get_json(silent=True) or {}
    block = engine.create_block(data.get("date"), data.get("startTime"), data.get("endTime"), data.get("branchId"))
    return jsonify(block.to_dict())


@availability_bp.route("/bulk", methods=["POST"])
@roles_required("ADMIN")
def create_blocks():
    data = request.get_json(silent=True) or {}
    dates = data.get("dates") or []
    branch_ids = data.get("branchIds") or []
    if not isinstance(dates, list) or not isinstance(branch_ids, list):
        raise ValidationError("dates and branchIds must be lists")
    blocks = engine.create_blocks(dates, branch_ids, data.get("startTime"), data.get("endTime"))
    return jsonify([b.to_dict() for b in blocks])


@availability_bp.route("/<block_id>", methods=["DELETE"])
@roles_required("ADMIN")
def delete_block(block_id: str):
    engine.delete_block(block_id)
    return jsonify({"success": True})


@availability_bp.route("/slots", methods=["GET"])
def list_slots():
    date = request.args.get("date")
    if not date:
        raise ValidationError("Date is required")
    return jsonify(engine.available_slots(date, request.args.get("branchId")))


@availability_bp.route("/dates", methods=["GET"])
def list_dates():
    return jsonify(engine.available_dates(request.args.get("branchId")))
