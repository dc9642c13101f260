from tests.helpers import factories
from tests.helpers.asserts import api_call, assert_error


def _enrolled_student(db_session, student_login, course):
    student, headers = student_login()
    factories.enroll(db_session, student_id=student.id, course_id=course.id)
    return student, headers


def test_review_is_created_then_updated(client, db_session, course_factory, student_login):
    course = course_factory()
    _, headers = _enrolled_student(db_session, student_login, course)

    created = client.post("/student/reviews", headers=headers, json={"course_id": course.id, "rating": 4, "comment": "Solid"})
    assert created.status_code == 201
    assert created.json()["message"] == "Review submitted successfully"

    updated = client.post("/student/reviews", headers=headers, json={"course_id": course.id, "rating": 2})
    assert updated.status_code == 200
    assert updated.json()["message"] == "Review updated successfully"
    assert updated.json()["data"]["id"] == created.json()["data"]["id"]
    assert updated.json()["data"]["rating"] == 2

    own = api_call(client, "GET", f"/student/reviews/{course.id}", headers=headers).json()["data"]
    assert own["rating"] == 2


def test_review_requires_enrollment(client, course_factory, student_login):
    course = course_factory()
    _, headers = student_login()
    response = client.post("/student/reviews", headers=headers, json={"course_id": course.id, "rating": 5})
    assert_error(response, 403, "You must be enrolled in this course to review it.")


def test_rating_out_of_range(client, db_session, course_factory, student_login):
    course = course_factory()
    _, headers = _enrolled_student(db_session, student_login, course)
    assert_error(client.post("/student/reviews", headers=headers, json={"course_id": course.id, "rating": 6}), 422)
    assert_error(client.post("/student/reviews", headers=headers, json={"course_id": course.id, "rating": 0}), 422)


def test_course_review_summary(client, db_session, course_factory, student_login):
    course = course_factory()
    for rating in (5, 4, 4):
        _, headers = _enrolled_student(db_session, student_login, course)
        api_call(client, "POST", "/student/reviews", headers=headers, json={"course_id": course.id, "rating": rating})

    summary = api_call(client, "GET", f"/courses/{course.id}/reviews?limit=2").json()["data"]

    assert summary["total_reviews"] == 3
    assert summary["average_rating"] == 4.3
    assert summary["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 2, "5": 1}
    assert len(summary["reviews"]) == 2
    assert summary["reviews"][0]["student"]["first_name"] == "Test"
    assert summary["pagination"] == {"page": 1, "limit": 2, "total_pages": 2, "has_more": True}


def test_reviews_for_unknown_course(client):
    assert_error(client.get("/courses/424242/reviews"), 404, "Course not found.")


def test_no_review_yet(client, db_session, course_factory, student_login):
    course = course_factory()
    _, headers = _enrolled_student(db_session, student_login, course)
    assert api_call(client, "GET", f"/student/reviews/{course.id}", headers=headers).json()["data"] is None
