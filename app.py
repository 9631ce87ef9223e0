from __future__ import annotations
import os
from importlib import import_module
from flask import Flask
from config import config_map
from extensions import db, migrate, login_manager, csrf
from werkzeug.security import generate_password_hash
from sqlalchemy import inspect

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # таблицы может ещё не быть (alembic upgrade и т.п.)
        insp = inspect(db.engine)
        if not insp.has_table("users") or not insp.has_table("restaurant_tables"):
            return

        from models import User  # локальный импорт, чтобы избежать циклов
        from blueprints.tables.services import initialize_tables
        created = 0
        for u in app.config.get("DEFAULT_USERS", []):
            if User.query.filter_by(email=u["email"]).first():
                continue
            db.session.add(User(
                email=u["email"],
                name=u.get("name"),
                password_hash=generate_password_hash(u["password"]),
                role=u["role"],
                is_active_flag=True,
            ))
            created += 1
        if app.config.get("SEED_TABLES"):
            created += initialize_tables(app.config["TABLE_COUNT"], app.config["DEFAULT_TABLE_CAPACITY"])
        if created:
            db.session.commit()

def register_blueprints(app: Flask) -> None:
    # Жёстко импортируем модуль с маршрутами core перед взятием bp
    import_module("blueprints.core.routes")
    from blueprints.core import bp as core_bp, api_bp as core_api_bp
    from blueprints.auth.routes import api_bp as auth_api_bp
    from blueprints.tables.routes import api_bp as tables_api_bp
    from blueprints.reservations.routes import api_bp as reservations_api_bp

    # core без префикса → '/health' в корне
    app.register_blueprint(core_bp)
    app.register_blueprint(core_api_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_api_bp, url_prefix="/api/v1")
    app.register_blueprint(tables_api_bp, url_prefix="/api/v1")
    app.register_blueprint(reservations_api_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app
