# tests/conftest.py
import os

import pytest
from sqlalchemy.orm import sessionmaker

from cadence.db.models import Base, User
from cadence.db.session import create_db_engine

# Define a test database URL
TEST_DATABASE_PATH = "./test_cadence.db"
TEST_DATABASE_URL = f"sqlite:///{TEST_DATABASE_PATH}"

engine = create_db_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_database():
    yield
    engine.dispose()
    if os.path.exists(TEST_DATABASE_PATH):
        os.remove(TEST_DATABASE_PATH)


@pytest.fixture()
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def user(db_session):
    user = User(email="Planner@Example.com", language="de")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user
