from coursehub.core.constants import AdminRoleEnum, CourseStatusEnum
from tests.helpers import factories
from tests.helpers.asserts import api_call, assert_error


def _staff_headers(client, staff):
    return {"Authorization": f"Bearer {factories.login_staff(client, staff.email)}"}


class TestCourseManagement:
    def test_admin_creates_and_publishes_course(self, client, admin_headers):
        response = client.post("/courses", headers=admin_headers, json={"title": "Intro to Options", "price": "49.99"})
        assert response.status_code == 201
        course = response.json()["data"]
        assert course["status"] == CourseStatusEnum.DRAFT.value

        updated = api_call(client, "PUT", f"/courses/{course['id']}", headers=admin_headers, json={"status": "PUBLISHED"})
        assert updated.json()["data"]["status"] == CourseStatusEnum.PUBLISHED.value

    def test_tutor_manages_only_own_courses(self, client, admin_factory, course_factory):
        tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        own = course_factory(creator=tutor)
        other = course_factory()
        headers = _staff_headers(client, tutor)

        api_call(client, "PUT", f"/courses/{own.id}", headers=headers, json={"title": "Renamed"})
        response = client.put(f"/courses/{other.id}", headers=headers, json={"title": "Hijacked"})
        assert_error(response, 403, "You do not have permission to manage this course.")

        listed = api_call(client, "GET", "/courses", headers=headers).json()["data"]
        assert [c["id"] for c in listed] == [own.id]

    def test_assigned_tutor_can_manage(self, client, admin_factory, course_factory):
        tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        course = course_factory(tutor_id=tutor.id)
        api_call(client, "PUT", f"/courses/{course.id}", headers=_staff_headers(client, tutor), json={"description": "Updated"})

    def test_only_admin_reassigns_tutor(self, client, admin_factory, admin_headers):
        tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        other_tutor = admin_factory(role=AdminRoleEnum.TUTOR)
        tutor_headers = _staff_headers(client, tutor)

        course = api_call(client, "POST", "/courses", headers=tutor_headers, json={"title": "Tutor course"}).json()["data"]
        response = client.put(f"/courses/{course['id']}", headers=tutor_headers, json={"tutor_id": other_tutor.id})
        assert_error(response, 403, "Only administrators can reassign a course's tutor.")

        reassigned = api_call(client, "PUT", f"/courses/{course['id']}", headers=admin_headers, json={"tutor_id": other_tutor.id})
        assert reassigned.json()["data"]["tutor_id"] == other_tutor.id

    def test_unknown_tutor_is_rejected(self, client, admin_headers):
        response = client.post("/courses", headers=admin_headers, json={"title": "Orphan", "tutor_id": 424242})
        assert_error(response, 400, "Assigned tutor not found.")

    def test_course_requires_staff(self, client, student_login):
        _, headers = student_login()
        assert_error(client.post("/courses", headers=headers, json={"title": "Nope"}), 401)

    def test_delete_course(self, client, admin_headers, course_factory):
        course = course_factory(materials=2)
        api_call(client, "DELETE", f"/courses/{course.id}", headers=admin_headers)
        assert_error(client.get(f"/courses/{course.id}", headers=admin_headers), 404, "Course not found.")


class TestCurriculum:
    def test_modules_and_materials(self, client, admin_headers, course_factory):
        course = course_factory()
        module = api_call(client, "POST", "/modules", headers=admin_headers, json={
            "title": "Week 1", "course_id": course.id
        }).json()["data"]

        material = api_call(client, "POST", "/materials", headers=admin_headers, json={
            "title": "Reading", "content": "Chapter 1", "course_id": course.id, "module_id": module["id"]
        }).json()["data"]
        assert material["module_id"] == module["id"]

        modules = api_call(client, "GET", f"/modules/course/{course.id}", headers=admin_headers).json()["data"]
        assert modules[0]["materials"][0]["id"] == material["id"]

    def test_material_module_must_belong_to_course(self, client, admin_headers, course_factory):
        first = course_factory()
        second = course_factory()
        module = api_call(client, "POST", "/modules", headers=admin_headers, json={
            "title": "Elsewhere", "course_id": second.id
        }).json()["data"]

        response = client.post("/materials", headers=admin_headers, json={
            "title": "Misplaced", "content": "x", "course_id": first.id, "module_id": module["id"]
        })
        assert_error(response, 400, "Module does not belong to this course.")

    def test_material_needs_content_or_file(self, client, admin_headers, course_factory):
        course = course_factory()
        response = client.post("/materials", headers=admin_headers, json={"title": "Empty", "course_id": course.id})
        assert_error(response, 422)


class TestCatalogue:
    def test_only_published_public_courses_are_listed(self, client, course_factory):
        published = course_factory(title="Visible")
        course_factory(status=CourseStatusEnum.DRAFT, title="Draft")
        course_factory(is_public=False, title="Private")

        data = api_call(client, "GET", "/student/courses").json()["data"]
        assert data["total"] == 1
        assert [c["id"] for c in data["items"]] == [published.id]

    def test_draft_course_detail_is_hidden(self, client, course_factory):
        draft = course_factory(status=CourseStatusEnum.DRAFT)
        assert_error(client.get(f"/student/courses/{draft.id}"), 404)

    def test_detail_shows_enrollment_for_signed_in_student(self, client, db_session, course_factory, student_login):
        course = course_factory(materials=2, assignments=1)
        student, headers = student_login()

        anonymous = api_call(client, "GET", f"/student/courses/{course.id}").json()["data"]
        assert anonymous["is_enrolled"] is False
        assert anonymous["assignment_count"] == 1
        assert len(anonymous["unassigned_materials"]) == 2

        factories.enroll(db_session, student_id=student.id, course_id=course.id)
        signed_in = api_call(client, "GET", f"/student/courses/{course.id}", headers=headers).json()["data"]
        assert signed_in["is_enrolled"] is True

    def test_search_by_title(self, client, course_factory):
        course_factory(title="Options Pricing")
        course_factory(title="Bond Basics")
        data = api_call(client, "GET", "/student/courses?search=options").json()["data"]
        assert [c["title"] for c in data["items"]] == ["Options Pricing"]
