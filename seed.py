"""
Idempotent seed-скрипт.
Запуск:
  python seed.py --reset         # дропнуть и пересоздать БД + столы + пользователи
  python seed.py --ensure-admin  # создать только пользователя admin@example.com/pass
  python seed.py                 # мягкое наполнение недостающих данных (idempotent)
"""
import argparse

from app import create_app
from extensions import db
from models import Role, User
from blueprints.tables.services import initialize_tables

def ensure_user(email: str, password: str, role: str, name: str | None = None) -> bool:
    if User.query.filter_by(email=email).first():
        return False
    u = User(email=email, name=name, role=role, is_active_flag=True)
    u.set_password(password)
    db.session.add(u)
    return True

def seed(app) -> None:
    cfg = app.config
    tables = initialize_tables(cfg["TABLE_COUNT"], cfg["DEFAULT_TABLE_CAPACITY"])
    users = 0
    for u in cfg.get("DEFAULT_USERS", []):
        users += ensure_user(u["email"], u["password"], u["role"], u.get("name"))
    db.session.commit()
    print(f"tables created: {tables}, users created: {users}")

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="drop & create all tables")
    parser.add_argument("--ensure-admin", action="store_true", help="only create admin user")
    parser.add_argument("--config", default="dev")
    args = parser.parse_args()

    app = create_app(args.config)
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        if args.ensure_admin:
            created = ensure_user("admin@example.com", "pass", Role.ADMIN.value, "Admin")
            db.session.commit()
            print("admin created" if created else "admin already exists")
            return
        seed(app)

if __name__ == "__main__":
    main()
