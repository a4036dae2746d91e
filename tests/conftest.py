import os

# Settings are read at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.user import User
from app.models.team import Team
from app.models.team_membership import TeamMembership
from app.models.book import Book
from app.models.account import Account
from app.models.category import Category
from app.models.transaction import Transaction
from app.models.role import TeamRole
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token


def headers_for(user: User) -> dict:
    """Authorization headers for an existing user"""
    return {"Authorization": f"Bearer {create_test_token(user_id=user.auth_user_id)}"}


def make_user(db_session, auth_user_id: str, **fields) -> User:
    user = User(auth_user_id=auth_user_id, username=auth_user_id, **fields)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def add_membership(db_session, team: Team, user: User, role: TeamRole) -> TeamMembership:
    membership = TeamMembership(team_id=team.id, user_id=user.id, role=role)
    db_session.add(membership)
    db_session.commit()
    return membership


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "alice")


@pytest.fixture
def collaborator_user(db_session):
    return make_user(db_session, "bob")


@pytest.fixture
def viewer_user(db_session):
    return make_user(db_session, "carol")


@pytest.fixture
def outsider_user(db_session):
    """User with no membership anywhere"""
    return make_user(db_session, "mallory")


@pytest.fixture
def team(db_session, admin_user, collaborator_user, viewer_user):
    """Team with one member per role: alice ADMIN, bob COLLABORATOR, carol VIEWER"""
    team = Team(name="Household")
    db_session.add(team)
    db_session.commit()
    db_session.refresh(team)

    add_membership(db_session, team, admin_user, TeamRole.ADMIN)
    add_membership(db_session, team, collaborator_user, TeamRole.COLLABORATOR)
    add_membership(db_session, team, viewer_user, TeamRole.VIEWER)
    return team


@pytest.fixture
def book(db_session, team):
    book = Book(team_id=team.id, name="Family Budget")
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def account(db_session, book):
    account = Account(book_id=book.id, name="Checking")
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def category(db_session, book):
    category = Category(book_id=book.id, name="Groceries")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def transaction(db_session, account, category):
    from datetime import date
    from decimal import Decimal

    transaction = Transaction(
        account_id=account.id,
        category_id=category.id,
        description="Weekly shop",
        amount=Decimal("-84.20"),
        date=date(2026, 3, 14),
    )
    db_session.add(transaction)
    db_session.commit()
    db_session.refresh(transaction)
    return transaction


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user)


@pytest.fixture
def collaborator_headers(collaborator_user):
    return headers_for(collaborator_user)


@pytest.fixture
def viewer_headers(viewer_user):
    return headers_for(viewer_user)


@pytest.fixture
def outsider_headers(outsider_user):
    return headers_for(outsider_user)
