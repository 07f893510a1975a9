import os

# must be set before the app modules are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from models import Base, Profile, get_db
from security import create_access_token


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    """Session for seeding and inspecting rows. Commit before calling the API."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    main.app.dependency_overrides[get_db] = override_get_db
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()


def make_headers(user_id: str, email: str = None, display_name: str = None) -> dict:
    claims = {"sub": user_id, "email": email or f"{user_id}@example.edu"}
    if display_name:
        claims["user_metadata"] = {"display_name": display_name}
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


@pytest.fixture
def student_headers():
    return make_headers("student-1", display_name="Asha")


@pytest.fixture
def other_headers():
    return make_headers("student-2", display_name="Ravi")


@pytest.fixture
def admin_headers(db):
    db.add(Profile(user_id="admin-1", display_name="Admin", role="admin", points=0))
    db.commit()
    return make_headers("admin-1")


RATINGS = {
    "teaching_quality": 5,
    "approachability": 4,
    "clarity": 4,
    "availability": 3,
    "fairness": 4,
}


def review_body(content="Explains concepts clearly.", **overrides):
    body = dict(RATINGS, content=content)
    body.update(overrides)
    return body


@pytest.fixture
def add_faculty(client, student_headers):
    def _add(name="Kumaravelu R", department="CSE", headers=None, **extra):
        payload = {"name": name, "department": department}
        payload.update(extra)
        resp = client.post("/faculty", json=payload, headers=headers or student_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _add
