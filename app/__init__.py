import logging

import click
from flask import Flask, jsonify, redirect, request, url_for
from .errors import DomainError
from .extensions import db, migrate, login_manager

STATUS_LABELS = {
    "not_started": "Not started", "in_progress": "In progress",
    "completed": "Completed", "cancelled": "Cancelled",
    "active": "Active", "dropped": "Dropped",
    "present": "Present", "absent": "Absent", "late": "Late", "excused": "Excused",
}


def register_filters(app):
    @app.template_filter("status_label")
    def status_label(value):
        key = getattr(value, "value", value)
        return STATUS_LABELS.get(key, str(key))


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)
    logging.getLogger("app").setLevel(level)


def register_error_handlers(app):
    @app.errorhandler(DomainError)
    def handle_domain_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(500)
    def handle_internal_error(err):
        app.logger.error("Unhandled error on %s %s", request.method, request.path,
                         exc_info=getattr(err, "original_exception", None))
        if request.path.startswith("/api/"):
            return jsonify({"error": "internal", "message": "Internal server error"}), 500
        return "Internal server error", 500


def register_commands(app):
    @app.cli.command("create-admin")
    @click.argument("email")
    @click.argument("password")
    def create_admin_command(email, password):
        """Create an administrator account."""
        from .services.accounts import create_admin
        try:
            user = create_admin(email, password)
        except DomainError as exc:
            raise click.ClickException(exc.message)
        click.echo(f"Created admin {user.email}")

    @app.cli.command("init-db")
    def init_db_command():
        """Create tables without migrations (development only)."""
        db.create_all()
        click.echo("Database tables created")


def create_app(config_object=None):
    if config_object is None:
        from config import get_config_object
        config_object = get_config_object()
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"

    from . import models
    from .models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        if request.path.startswith("/api/"):
            return jsonify({"error": "unauthorized", "message": "Login required"}), 401
        return redirect(url_for("auth.login", next=request.path))

    from .blueprints.api import bp as api_bp
    from .blueprints.auth import bp as auth_bp
    from .blueprints.admin import bp as admin_bp
    from .blueprints.teacher import bp as teacher_bp
    from .blueprints.student import bp as student_bp
    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(teacher_bp, url_prefix="/teacher")
    app.register_blueprint(student_bp, url_prefix="/student")
    register_filters(app)
    register_error_handlers(app)
    register_commands(app)

    @app.get("/")
    def index():
        return redirect(url_for("auth.home"))

    app.logger.debug("App created with %s", config_object)
    return app
