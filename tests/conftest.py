import pytest

from blueprints.auth import routes as auth_routes

@pytest.fixture(autouse=True)
def _reset_login_attempts():
    # счётчик попыток логина живёт в памяти процесса, между тестами его надо чистить
    auth_routes._login_attempts.clear()
    yield
    auth_routes._login_attempts.clear()
