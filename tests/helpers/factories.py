from datetime import timedelta
from typing import Optional

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from coursehub.core.constants import (
    AdminRoleEnum,
    AuthProviderEnum,
    CourseStatusEnum,
    EnrollmentStatusEnum,
    MaterialTypeEnum,
)
from coursehub.core.security import get_password_hash
from coursehub.crud.admin import admin as crud_admin
from coursehub.crud.assignment import assignment as crud_assignment
from coursehub.crud.course import course as crud_course
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.crud.material import material as crud_material
from coursehub.crud.student import student as crud_student
from coursehub.utils.dates import utcnow


def create_admin(db: Session, *, email: str, password: str = "testpass123", role=AdminRoleEnum.ADMIN, is_active=True):
    return crud_admin.create(
        db,
        obj_in={
            "email": email.lower(),
            "hashed_password": get_password_hash(password),
            "first_name": "Test",
            "last_name": role.value.title(),
            "role": role,
            "is_active": is_active,
        },
    )


def create_student(db: Session, *, email: str, password: Optional[str] = "testpass123", **overrides):
    data = {
        "email": email.lower(),
        "hashed_password": get_password_hash(password) if password else None,
        "first_name": "Test",
        "last_name": "Student",
        "auth_provider": AuthProviderEnum.EMAIL if password else AuthProviderEnum.GOOGLE,
        "is_active": True,
        "is_verified": True,
        "blocked": False,
        "session_version": 0,
    }
    data.update(overrides)
    return crud_student.create(db, obj_in=data)


def create_course(db: Session, *, creator_id: int, status=CourseStatusEnum.PUBLISHED, **overrides):
    data = {
        "title": "Test Course",
        "description": "A course for tests",
        "status": status,
        "is_public": True,
        "price": 0,
        "creator_id": creator_id,
    }
    data.update(overrides)
    return crud_course.create(db, obj_in=data)


def create_material(db: Session, *, course_id: int, order_index: int = 0, module_id: Optional[int] = None):
    return crud_material.create(
        db,
        obj_in={
            "title": f"Material {order_index + 1}",
            "material_type": MaterialTypeEnum.DOCUMENT,
            "content": "Read me",
            "order_index": order_index,
            "course_id": course_id,
            "module_id": module_id,
        },
    )


def create_assignment(db: Session, *, course_id: int, creator_id: int, due_in_days: Optional[int] = 7, max_score: int = 100):
    return crud_assignment.create(
        db,
        obj_in={
            "title": "Homework",
            "description": "Write something",
            "due_date": utcnow() + timedelta(days=due_in_days) if due_in_days is not None else None,
            "max_score": max_score,
            "course_id": course_id,
            "creator_id": creator_id,
        },
    )


def enroll(db: Session, *, student_id: int, course_id: int, status=EnrollmentStatusEnum.ACTIVE):
    return crud_enrollment.create(
        db,
        obj_in={
            "student_id": student_id,
            "course_id": course_id,
            "status": status,
            "progress_percentage": 0,
            "enrolled_at": utcnow(),
            "version": 0,
        },
    )


def _token_from(response) -> str:
    body = response.json()
    assert response.status_code == 200, f"Login failed: {body}"
    return body["data"]["token"]["access_token"]


def login_student(client: TestClient, email: str, password: str = "testpass123") -> str:
    response = client.post("/student/auth/login", json={"email": email, "password": password})
    token = _token_from(response)
    # Tests pass credentials explicitly; the cookie jar would otherwise win over the header.
    client.cookies.clear()
    return token


def login_staff(client: TestClient, email: str, password: str = "testpass123") -> str:
    response = client.post("/auth/login", json={"email": email, "password": password})
    token = _token_from(response)
    client.cookies.clear()
    return token
