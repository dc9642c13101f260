from coursehub.core.constants import AdminRoleEnum, CourseStatusEnum, EnrollmentStatusEnum
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.crud.material import material as crud_material
from coursehub.crud.progress import progress as crud_progress
from tests.helpers import factories
from tests.helpers.asserts import api_call, assert_error


class TestStudentEnrollment:
    def test_enroll_in_published_course(self, client, course_factory, student_login):
        course = course_factory()
        _, headers = student_login()

        response = client.post("/student/enrollments", headers=headers, json={"course_id": course.id})

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["course"]["id"] == course.id
        assert data["status"] == EnrollmentStatusEnum.ACTIVE.value
        assert data["progress_percentage"] == 0

        listed = api_call(client, "GET", "/student/enrollments", headers=headers).json()["data"]
        assert [e["course_id"] for e in listed] == [course.id]

    def test_enrolling_twice(self, client, course_factory, student_login):
        course = course_factory()
        _, headers = student_login()
        api_call(client, "POST", "/student/enrollments", headers=headers, json={"course_id": course.id})

        response = client.post("/student/enrollments", headers=headers, json={"course_id": course.id})
        assert_error(response, 400, "Already enrolled in this course")

    def test_draft_course_is_closed(self, client, course_factory, student_login):
        course = course_factory(status=CourseStatusEnum.DRAFT)
        _, headers = student_login()
        response = client.post("/student/enrollments", headers=headers, json={"course_id": course.id})
        assert_error(response, 400, "This course is not open for enrollment.")

    def test_unknown_course(self, client, student_login):
        _, headers = student_login()
        assert_error(client.post("/student/enrollments", headers=headers, json={"course_id": 987654}), 404)


class TestStaffEnrollment:
    def _enrollment(self, db_session, course_factory, student_factory, **course_kwargs):
        course = course_factory(**course_kwargs)
        student = student_factory()
        return factories.enroll(db_session, student_id=student.id, course_id=course.id), course, student

    def test_list_course_enrollments(self, client, db_session, admin_headers, course_factory, student_factory):
        enrollment, course, student = self._enrollment(db_session, course_factory, student_factory)
        data = api_call(client, "GET", f"/enrollments/course/{course.id}", headers=admin_headers).json()["data"]
        assert data[0]["id"] == enrollment.id
        assert data[0]["student"]["email"] == student.email

    def test_tutor_only_sees_own_course(self, client, db_session, admin_factory, course_factory, student_factory):
        _, course, _ = self._enrollment(db_session, course_factory, student_factory)
        tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        headers = {"Authorization": f"Bearer {factories.login_staff(client, tutor.email)}"}
        assert_error(client.get(f"/enrollments/course/{course.id}", headers=headers), 403)

    def test_admin_sets_status(self, client, db_session, admin_headers, course_factory, student_factory):
        enrollment, _, _ = self._enrollment(db_session, course_factory, student_factory)

        data = api_call(
            client, "PUT", f"/enrollments/{enrollment.id}/status", headers=admin_headers, json={"status": "COMPLETED"}
        ).json()["data"]
        assert data["status"] == EnrollmentStatusEnum.COMPLETED.value
        assert data["completed_at"] is not None

        dropped = api_call(
            client, "PUT", f"/enrollments/{enrollment.id}/status", headers=admin_headers, json={"status": "DROPPED"}
        ).json()["data"]
        assert dropped["status"] == EnrollmentStatusEnum.DROPPED.value
        assert dropped["completed_at"] is None
        db_session.refresh(enrollment)
        assert enrollment.version == 2

    def test_status_change_conflict(self, client, db_session, admin_headers, course_factory, student_factory, monkeypatch):
        enrollment, _, _ = self._enrollment(db_session, course_factory, student_factory)
        monkeypatch.setattr(crud_enrollment, "compare_and_set", lambda db, **kwargs: False)
        response = client.put(f"/enrollments/{enrollment.id}/status", headers=admin_headers, json={"status": "DROPPED"})
        assert_error(response, 409)

    def test_delete_removes_progress(self, client, db_session, admin_headers, course_factory, student_factory):
        enrollment, course, student = self._enrollment(db_session, course_factory, student_factory, materials=1)
        material = crud_material.get_by_course(db_session, course_id=course.id)[0]
        crud_progress.get_or_create(db_session, student_id=student.id, course_id=course.id, material_id=material.id)

        api_call(client, "DELETE", f"/enrollments/{enrollment.id}", headers=admin_headers)

        assert crud_enrollment.get_by_student_and_course(db_session, student_id=student.id, course_id=course.id) is None
        assert crud_progress.get_by_student_and_course(db_session, student_id=student.id, course_id=course.id) == []

    def test_tutor_cannot_change_status(self, client, db_session, admin_factory, course_factory, student_factory):
        tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        enrollment, _, _ = self._enrollment(db_session, course_factory, student_factory, creator=tutor)
        headers = {"Authorization": f"Bearer {factories.login_staff(client, tutor.email)}"}
        response = client.put(f"/enrollments/{enrollment.id}/status", headers=headers, json={"status": "DROPPED"})
        assert_error(response, 403)

    def test_reopening_clears_completion_date(self, client, db_session, admin_headers, course_factory, student_factory):
        enrollment, _, _ = self._enrollment(db_session, course_factory, student_factory)
        api_call(
            client, "PUT", f"/enrollments/{enrollment.id}/status", headers=admin_headers, json={"status": "COMPLETED"}
        )

        reopened = api_call(
            client, "PUT", f"/enrollments/{enrollment.id}/status", headers=admin_headers, json={"status": "ACTIVE"}
        ).json()["data"]

        assert reopened["status"] == EnrollmentStatusEnum.ACTIVE.value
        assert reopened["completed_at"] is None
        db_session.refresh(enrollment)
        assert enrollment.completed_at is None


class TestCourseCompletion:
    def _complete_first_material(self, db_session, student, course):
        material = crud_material.get_by_course(db_session, course_id=course.id)[0]
        record = crud_progress.get_or_create(
            db_session, student_id=student.id, course_id=course.id, material_id=material.id
        )
        crud_progress.mark_completed(db_session, record=record)

    def test_reports_recounted_progress_per_student(
        self, client, db_session, admin_headers, course_factory, student_factory
    ):
        course = course_factory(materials=2)
        ahead, behind = student_factory(), student_factory()
        ahead_enrollment = factories.enroll(db_session, student_id=ahead.id, course_id=course.id)
        factories.enroll(db_session, student_id=behind.id, course_id=course.id)
        self._complete_first_material(db_session, ahead, course)

        data = api_call(
            client, "GET", f"/enrollments/course/{course.id}/completion", headers=admin_headers
        ).json()["data"]

        assert data["course_id"] == course.id
        assert data["course_title"] == course.title
        assert data["total_students"] == 2
        assert data["total_items"] == 2
        assert data["average_completion"] == 25

        by_student = {s["student"]["id"]: s for s in data["students"]}
        assert by_student[ahead.id]["enrollment_id"] == ahead_enrollment.id
        assert by_student[ahead.id]["stats"]["completed_materials"] == 1
        assert by_student[ahead.id]["stats"]["progress_percentage"] == 50
        assert by_student[ahead.id]["stored_percentage"] == 0
        assert by_student[ahead.id]["status"] == EnrollmentStatusEnum.ACTIVE.value
        assert by_student[behind.id]["stats"]["progress_percentage"] == 0

    def test_average_rounds_half_up(self, client, db_session, admin_headers, course_factory, student_factory):
        course = course_factory(materials=3)
        ahead, behind = student_factory(), student_factory()
        factories.enroll(db_session, student_id=ahead.id, course_id=course.id)
        factories.enroll(db_session, student_id=behind.id, course_id=course.id)
        self._complete_first_material(db_session, ahead, course)

        data = api_call(
            client, "GET", f"/enrollments/course/{course.id}/completion", headers=admin_headers
        ).json()["data"]

        # 33 and 0 average to 16.5
        assert data["average_completion"] == 17

    def test_course_without_students(self, client, admin_headers, course_factory):
        course = course_factory(materials=1, assignments=1)
        data = api_call(
            client, "GET", f"/enrollments/course/{course.id}/completion", headers=admin_headers
        ).json()["data"]
        assert data["total_students"] == 0
        assert data["total_items"] == 2
        assert data["average_completion"] == 0
        assert data["students"] == []

    def test_completion_is_staff_only(self, client, course_factory, student_login):
        course = course_factory()
        _, headers = student_login()
        response = client.get(f"/enrollments/course/{course.id}/completion", headers=headers)
        assert response.status_code in (401, 403)

    def test_tutor_cannot_read_other_course(
        self, client, db_session, admin_factory, course_factory, student_factory
    ):
        course = course_factory()
        enrollment = factories.enroll(db_session, student_id=student_factory().id, course_id=course.id)
        tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        headers = {"Authorization": f"Bearer {factories.login_staff(client, tutor.email)}"}

        assert_error(client.get(f"/enrollments/course/{course.id}/completion", headers=headers), 403)
        assert_error(client.get(f"/enrollments/{enrollment.id}/progress", headers=headers), 403)

    def test_tutor_reads_own_course(self, client, db_session, admin_factory, course_factory, student_factory):
        tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        course = course_factory(creator=tutor, materials=1)
        factories.enroll(db_session, student_id=student_factory().id, course_id=course.id)
        headers = {"Authorization": f"Bearer {factories.login_staff(client, tutor.email)}"}

        data = api_call(client, "GET", f"/enrollments/course/{course.id}/completion", headers=headers).json()["data"]
        assert data["total_students"] == 1

    def test_unknown_course(self, client, admin_headers):
        assert_error(client.get("/enrollments/course/987654/completion", headers=admin_headers), 404)

    def test_enrollment_progress_detail(self, client, db_session, admin_headers, course_factory, student_factory):
        course = course_factory(materials=2, assignments=1)
        student = student_factory()
        enrollment = factories.enroll(db_session, student_id=student.id, course_id=course.id)
        self._complete_first_material(db_session, student, course)

        data = api_call(
            client, "GET", f"/enrollments/{enrollment.id}/progress", headers=admin_headers
        ).json()["data"]

        assert data["enrollment"]["id"] == enrollment.id
        assert len(data["materials"]) == 2
        assert len(data["assignments"]) == 1
        assert sum(1 for m in data["materials"] if m["progress"] and m["progress"]["is_completed"]) == 1
        assert data["stats"]["total_items"] == 3
        assert data["stats"]["completed_items"] == 1
        assert data["stats"]["progress_percentage"] == 33
        assert data["stats"]["total_time_spent"] == 0

    def test_unknown_enrollment_progress(self, client, admin_headers):
        assert_error(client.get("/enrollments/987654/progress", headers=admin_headers), 404, "Enrollment not found.")
