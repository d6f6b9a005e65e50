from datetime import datetime, timezone

from flask import Blueprint, jsonify


health_bp = Blueprint("health", __name__)


@health_bp.route("/status")
@health_bp.route("/api/health")
def status():
    return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})
