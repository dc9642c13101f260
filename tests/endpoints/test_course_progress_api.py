from coursehub.core.constants import EnrollmentStatusEnum
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.crud.material import material as crud_material
from coursehub.crud.progress import progress as crud_progress
from tests.helpers import factories
from tests.helpers.asserts import api_call, assert_error


def _setup(db_session, course_factory, student_login, materials=5, assignments=0):
    course = course_factory(materials=materials, assignments=assignments)
    student, headers = student_login()
    factories.enroll(db_session, student_id=student.id, course_id=course.id)
    return student, course, headers, crud_material.get_by_course(db_session, course_id=course.id)


def test_completing_materials_updates_progress(client, db_session, course_factory, student_login):
    student, course, headers, materials = _setup(db_session, course_factory, student_login)

    for index, material in enumerate(materials[:4], start=1):
        data = api_call(client, "POST", f"/student/materials/{material.id}/complete", headers=headers).json()["data"]
        assert data["material_id"] == material.id
        assert data["is_completed"] is True
        assert data["completed_items"] == index
        assert data["total_items"] == 5
        assert data["progress_synced"] is True

    assert data["progress_percentage"] == 80
    enrollment = crud_enrollment.get_by_student_and_course(db_session, student_id=student.id, course_id=course.id)
    assert enrollment.status == EnrollmentStatusEnum.ACTIVE

    data = api_call(client, "POST", f"/student/materials/{materials[4].id}/complete", headers=headers).json()["data"]
    assert data["progress_percentage"] == 100
    db_session.refresh(enrollment)
    assert enrollment.status == EnrollmentStatusEnum.COMPLETED
    assert enrollment.completed_at is not None


def test_repeat_completion_is_idempotent(client, db_session, course_factory, student_login):
    _, _, headers, materials = _setup(db_session, course_factory, student_login, materials=3)
    path = f"/student/materials/{materials[0].id}/complete"

    first = api_call(client, "POST", path, headers=headers).json()["data"]
    second = api_call(client, "POST", path, headers=headers).json()["data"]

    assert first["completed_items"] == second["completed_items"] == 1
    assert second["progress_percentage"] == 33


def test_viewing_material_tracks_access(client, db_session, course_factory, student_login):
    student, course, headers, materials = _setup(db_session, course_factory, student_login, materials=1)
    path = f"/student/materials/{materials[0].id}"

    api_call(client, "GET", path, headers=headers)
    response = api_call(client, "GET", path, headers=headers)

    assert response.json()["data"]["id"] == materials[0].id
    record = crud_progress.get_by_student_and_material(db_session, student.id, course.id, materials[0].id)
    assert record.time_spent == 2
    assert record.is_completed is False
    assert record.last_accessed is not None


def test_material_requires_enrollment(client, course_factory, student_login, db_session):
    course = course_factory(materials=1)
    _, headers = student_login()
    material = crud_material.get_by_course(db_session, course_id=course.id)[0]

    response = client.post(f"/student/materials/{material.id}/complete", headers=headers)
    assert_error(response, 403, "You must be enrolled in this course to access its content.")


def test_unknown_material(client, student_login):
    _, headers = student_login()
    assert_error(client.get("/student/materials/999999", headers=headers), 404, "Material not found.")


def test_completion_survives_failed_recount(client, db_session, course_factory, student_login, monkeypatch):
    student, course, headers, materials = _setup(db_session, course_factory, student_login, materials=2)
    monkeypatch.setattr(crud_enrollment, "compare_and_set", lambda db, **kwargs: False)

    data = api_call(client, "POST", f"/student/materials/{materials[0].id}/complete", headers=headers).json()["data"]

    assert data["progress_synced"] is False
    assert data["progress_percentage"] == 0
    record = crud_progress.get_by_student_and_material(db_session, student.id, course.id, materials[0].id)
    assert record.is_completed is True


def test_progress_detail(client, db_session, course_factory, student_login):
    _, course, headers, materials = _setup(db_session, course_factory, student_login, materials=2, assignments=1)
    api_call(client, "GET", f"/student/materials/{materials[0].id}", headers=headers)
    api_call(client, "POST", f"/student/materials/{materials[0].id}/complete", headers=headers)

    detail = api_call(client, "GET", f"/student/enrollments/{course.id}/progress", headers=headers).json()["data"]

    assert detail["enrollment"]["progress_percentage"] == 33
    assert detail["stats"]["completed_materials"] == 1
    assert detail["stats"]["total_items"] == 3
    assert detail["stats"]["total_time_spent"] == 1
    completed = [m for m in detail["materials"] if m["progress"] and m["progress"]["is_completed"]]
    assert [m["id"] for m in completed] == [materials[0].id]
    assert detail["assignments"][0]["submission"] is None
