import logging
import os

import click
import pytz
from dotenv import load_dotenv
from flask import Flask
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
login_manager = LoginManager()

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def create_app(test_config=None):
    # Load .env if present to simplify local setup
    load_dotenv()
    app = Flask(__name__, instance_relative_config=True)

    # Basic config (override via env in production)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", f"sqlite:///{os.path.join(app.instance_path, 'fitcoach.db')}"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SESSION_DURATION_MINUTES"] = int(os.getenv("SESSION_DURATION_MINUTES", "90"))
    app.config["SLOT_STEP_MINUTES"] = int(os.getenv("SLOT_STEP_MINUTES", "15"))
    app.config["TOKEN_MAX_AGE_SECONDS"] = int(os.getenv("TOKEN_MAX_AGE_SECONDS", str(7 * 24 * 3600)))
    app.config["COACH_TIMEZONE"] = os.getenv("COACH_TIMEZONE", "Europe/Prague")
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")
    if test_config:
        app.config.update(test_config)

    # Fail early on a bad zone name rather than on the first dashboard hit
    pytz.timezone(app.config["COACH_TIMEZONE"])

    logging.basicConfig(level=app.config["LOG_LEVEL"], format=LOG_FORMAT)
    os.makedirs(app.instance_path, exist_ok=True)

    # Init extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Models import for SQLAlchemy configuration
    from . import models  # noqa: F401

    # Token auth and JSON error translation
    from .auth import tokens  # noqa: F401
    from .errors import register_error_handlers
    register_error_handlers(app)

    # Blueprints
    from .health.routes import health_bp
    from .auth.routes import auth_bp
    from .admin.routes import admin_bp
    from .locations.routes import locations_bp
    from .availability.routes import availability_bp
    from .bookings.routes import bookings_bp
    from .meals.routes import meals_bp
    from .dashboard.routes import dash_bp
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(locations_bp)
    app.register_blueprint(availability_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(meals_bp)
    app.register_blueprint(dash_bp)

    # Create tables if not exist
    with app.app_context():
        db.create_all()

    # CLI helpers
    @app.cli.command("create-user")
    @click.option("--email", prompt=True)
    @click.option("--name", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option("--role", type=click.Choice(["CLIENT", "ADMIN"]), default="CLIENT")
    def create_user(email, name, password, role):
        """Create a user account."""
        from .models import User

        if User.query.filter_by(email=email.lower().strip()).first():
            click.echo("User already exists")
            return
        user = User(email=email.lower().strip(), name=name.strip(), role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"Created {role} user: {email}")

    @app.cli.command("purge-schedule")
    @click.option("--force", is_flag=True, help="Skip confirmation")
    def purge_schedule(force: bool):
        """Delete ALL bookings and availability blocks."""
        from .models import AvailabilityBlock, Booking, CalendarDay

        if not force:
            click.confirm(
                "This will DELETE all bookings and availability blocks. Continue?",
                abort=True,
            )
        b = db.session.query(Booking).delete(synchronize_session=False)
        a = db.session.query(AvailabilityBlock).delete(synchronize_session=False)
        db.session.query(CalendarDay).delete(synchronize_session=False)
        db.session.commit()
        click.echo(f"Deleted: bookings={b}, availability_blocks={a}")

    return app
