# Custom exceptions used throughout the project, plus their JSON translation.
import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)


class FitcoachError(Exception):
    """
    Base for every domain error. Raised before any mutation happens, so the
    caller can rely on nothing having been written when one surfaces.
    """
    status_code = 400
    message = "Invalid request"

    def __init__(self, message=None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationError(FitcoachError):
    """
    A required field is missing or malformed. May be raised when:
        1. A date is not YYYY-MM-DD or a time is not HH:MM
        2. A block's end time is not after its start time
        3. A session would end at or past midnight
    Not worth retrying without changing the input.
    """
    status_code = 400
    message = "Invalid data"


class SlotConflict(FitcoachError):
    """The requested interval overlaps a booking already held on that date."""
    status_code = 409
    message = "This time is already booked"


class BlockInUse(FitcoachError):
    """The block still covers at least one booking; cancel those first."""
    status_code = 409
    message = "Block contains bookings"


class NotFound(FitcoachError):
    status_code = 404
    message = "Not found"


class Forbidden(FitcoachError):
    status_code = 403
    message = "Access denied"


def register_error_handlers(app):
    @app.errorhandler(FitcoachError)
    def handle_domain_error(error):
        return jsonify({"error": error.message}), error.status_code

    # Storage failures are reported generically, never as a domain error
    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        from . import db

        db.session.rollback()
        log.error("Storage failure: %s", error)
        return jsonify({"error": "Storage failure"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        # Routing redirects are HTTPExceptions too; let them through untouched
        if error.code is None or error.code < 400:
            return error
        return jsonify({"error": error.description or error.name}), error.code
