from flask import Blueprint, jsonify, request

from fitcoach import db
from fitcoach.auth.routes import roles_required
from fitcoach.errors import NotFound, ValidationError
from fitcoach.models import Location


locations_bp = Blueprint("locations", __name__, url_prefix="/api/locations")


def _get_or_404(location_id: str) -> Location:
    location = db.session.get(Location, location_id)
    if not location:
        raise NotFound("Branch not found")
    return location


@locations_bp.route("", methods=["GET"])
def list_locations():
    query = Location.query
    if request.args.get("includeInactive") != "true":
        query = query.filter_by(is_active=True)
    return jsonify([loc.to_dict() for loc in query.order_by(Location.name.asc()).all()])


@locations_bp.route("", methods=["POST"])
@roles_required("ADMIN")
def create_location():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    address = (data.get("address") or "").strip()
    if not name or not address:
        raise ValidationError("Name and address are required")
    location = Location(name=name, address=address, is_active=bool(data.get("isActive", True)))
    db.session.add(location)
    db.session.commit()
    return jsonify(location.to_dict())


@locations_bp.route("/<location_id>", methods=["PUT"])
@roles_required("ADMIN")
def update_location(location_id: str):
    location = _get_or_404(location_id)
    data = request.get_json(silent=True) or {}
    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        location.name = name
    if "address" in data:
        location.address = (data.get("address") or "").strip()
    if "isActive" in data:
        location.is_active = bool(data["isActive"])
    db.session.commit()
    return jsonify(location.to_dict())


@locations_bp.route("/<location_id>", methods=["DELETE"])
@roles_required("ADMIN")
def delete_location(location_id: str):
    # Soft delete so existing blocks and bookings stay valid
    location = _get_or_404(location_id)
    location.is_active = False
    db.session.commit()
    return jsonify({"success": True})
