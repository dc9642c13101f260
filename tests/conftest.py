import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-secret")
os.environ.setdefault("LOG_DIR", "logs")

import uuid
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from coursehub.core.config import settings
from coursehub.core.constants import AdminRoleEnum, CourseStatusEnum
from coursehub.models import Base
from coursehub.utils import deps as deps_utils
import main
from tests.helpers import factories

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url.startswith("sqlite") and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="session")
def session_factory(database_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=database_engine)

@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.rollback()
        # Every test starts from empty tables.
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    # Re-initialize the app for each test function to ensure a clean state
    from importlib import reload
    reload(main)
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client


@pytest.fixture
def admin_factory(db_session):
    def _admin_factory(role=AdminRoleEnum.ADMIN, email=None, password="testpass123", is_active=True):
        return factories.create_admin(
            db_session,
            email=email or f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@test.com",
            password=password,
            role=role,
            is_active=is_active,
        )
    return _admin_factory

@pytest.fixture
def student_factory(db_session):
    def _student_factory(email=None, password="testpass123", **overrides):
        return factories.create_student(
            db_session,
            email=email or f"student-{uuid.uuid4().hex[:8]}@test.com",
            password=password,
            **overrides
        )
    return _student_factory

@pytest.fixture
def course_factory(db_session, admin_factory):
    def _course_factory(creator=None, materials=0, assignments=0, status=CourseStatusEnum.PUBLISHED, **overrides):
        creator = creator or admin_factory()
        course = factories.create_course(db_session, creator_id=creator.id, status=status, **overrides)
        for index in range(materials):
            factories.create_material(db_session, course_id=course.id, order_index=index)
        for index in range(assignments):
            factories.create_assignment(db_session, course_id=course.id, creator_id=creator.id)
        return course
    return _course_factory

@pytest.fixture
def admin_token(client, admin_factory):
    admin = admin_factory(role=AdminRoleEnum.ADMIN)
    return factories.login_staff(client, admin.email, "testpass123")

@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}

@pytest.fixture
def student_login(client, student_factory):
    """Registers a student and signs them in; returns (student, headers)."""
    def _student_login(**overrides):
        student = student_factory(**overrides)
        token = factories.login_student(client, student.email, "testpass123")
        return student, {"Authorization": f"Bearer {token}"}
    return _student_login
