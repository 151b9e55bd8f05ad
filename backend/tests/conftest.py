"""
Configuration partagée pour tous les tests.
- client : override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL.
- db_session : base SQLite en mémoire pour vérifier le comportement réel des requêtes.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

from school_admin.database import Base, get_db
from school_admin.main import app
from school_admin.models import Role

STUDENT_ROLE_ID = 3
ADMIN_ROLE_ID = 1


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Session sur une base SQLite en mémoire, avec les rôles admin et student."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    session.add_all([
        Role(id=ADMIN_ROLE_ID, name="admin"),
        Role(id=STUDENT_ROLE_ID, name="Student"),
    ])
    session.commit()
    yield session
    session.close()
    engine.dispose()
