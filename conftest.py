"""
Fixtures compartidas: base SQLite en memoria, sesión y cliente HTTP
"""
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.database.database import Database
from app.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        ENVIRONMENT="test",
        DEBUG=False,
        AUTO_RECONCILE_PARTIES=True,
    )


@pytest.fixture
def database(settings):
    """Base en memoria, una por test"""
    database = Database(settings.database_url)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(settings, database):
    app = create_app(settings, database)
    return TestClient(app)
