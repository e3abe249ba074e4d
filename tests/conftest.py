import os
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_app.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_FORMAT"] = "text"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.security import create_access_token, get_password_hash
from app.db.models.user import User as UserModel
from app.main import app

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def alembic_config(db_url: str) -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


@pytest.fixture(scope="function")
def db_session(tmp_path: Path):
    """Create a fresh database for each test and run migrations."""
    test_db_url = f"sqlite:///{(tmp_path / 'test.db').as_posix()}"

    test_engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    command.upgrade(alembic_config(test_db_url), "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        yield db_session

    from app.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def user_dict(db: Session) -> dict:
    """Create a user for testing."""
    email = "user@example.com"
    password = "UserPass123!"

    user = UserModel(email=email, password_hash=get_password_hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)

    return {
        "id": user.id,
        "email": user.email,
        "password": password,
    }


@pytest.fixture(scope="function")
def user_token(user_dict: dict) -> str:
    """Get JWT token for the test user."""
    return create_access_token(user_dict["id"])
