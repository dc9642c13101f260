from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from coursehub.core.constants import AdminRoleEnum, CourseLevelEnum
from coursehub.crud.admin import admin as crud_admin
from coursehub.crud.assignment import assignment as crud_assignment
from coursehub.crud.base import PaginatedResponse
from coursehub.crud.category import category as crud_category
from coursehub.crud.course import course as crud_course
from coursehub.crud.enrollment import enrollment as crud_enrollment
from coursehub.models.admin import Admin
from coursehub.models.course import Course as CourseModel
from coursehub.models.student import Student
from coursehub.schemas.course import Course as CourseSchema, CourseCreate, CourseDetail, CourseUpdate
from coursehub.schemas.material import Material as MaterialSchema
from coursehub.utils.permission import PermissionHelper as permission_helper


class CourseService:

    def _get_or_raise(self, db: Session, course_id: int) -> CourseModel:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        return course

    def _validate_tutor(self, db: Session, tutor_id: Optional[int]) -> None:
        if tutor_id is None:
            return
        tutor = crud_admin.get(db, id=tutor_id)
        if not tutor or tutor.role != AdminRoleEnum.TUTOR:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Assigned tutor not found.")

    def _validate_category(self, db: Session, category_id: Optional[int]) -> None:
        if category_id is not None and not crud_category.get(db, id=category_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found.")

    def get_managed_course(self, db: Session, course_id: int, staff: Admin) -> CourseModel:
        course = self._get_or_raise(db, course_id)
        permission_helper.require_course_management_permission(staff, course)
        return course

    def create_course(self, db: Session, course_in: CourseCreate, staff: Admin) -> CourseSchema:
        self._validate_tutor(db, course_in.tutor_id)
        self._validate_category(db, course_in.category_id)

        course_data = course_in.model_dump()
        course_data["creator_id"] = staff.id
        new_course = crud_course.create(db, obj_in=course_data)
        return CourseSchema.model_validate(self._get_or_raise(db, new_course.id))

    def update_course(self, db: Session, course_id: int, course_in: CourseUpdate, staff: Admin) -> CourseSchema:
        course = self.get_managed_course(db, course_id, staff)

        changes = course_in.model_dump(exclude_unset=True)
        if "tutor_id" in changes:
            if not permission_helper.is_admin(staff):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Only administrators can reassign a course's tutor."
                )
            self._validate_tutor(db, changes["tutor_id"])
        if "category_id" in changes:
            self._validate_category(db, changes["category_id"])

        updated_course = crud_course.update(db, db_obj=course, obj_in=changes)
        return CourseSchema.model_validate(updated_course)

    def delete_course(self, db: Session, course_id: int, staff: Admin) -> CourseSchema:
        course = self.get_managed_course(db, course_id, staff)
        course_data = CourseSchema.model_validate(course)
        crud_course.delete(db, id=course.id)
        return course_data

    def list_staff_courses(self, db: Session, staff: Admin, skip: int = 0, limit: int = 100) -> List[CourseSchema]:
        staff_id = None if permission_helper.is_admin(staff) else staff.id
        courses = crud_course.list_for_staff(db, staff_id=staff_id, skip=skip, limit=limit)
        return [CourseSchema.model_validate(c) for c in courses]

    def list_published_courses(
        self,
        db: Session,
        *,
        category_id: Optional[int] = None,
        level: Optional[CourseLevelEnum] = None,
        search: Optional[str] = None,
        page: int = 1,
        size: int = 20,
    ) -> PaginatedResponse[CourseSchema]:
        courses, total = crud_course.list_published(
            db, category_id=category_id, level=level, search=search, skip=(page - 1) * size, limit=size
        )
        return PaginatedResponse[CourseSchema].build(
            items=[CourseSchema.model_validate(c) for c in courses], total=total, page=page, size=size
        )

    def get_course_detail(self, db: Session, course_id: int, current_student: Optional[Student] = None) -> CourseDetail:
        course = crud_course.get_published(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")

        detail = CourseDetail.model_validate(course)
        detail.unassigned_materials = [
            MaterialSchema.model_validate(m) for m in course.materials if m.module_id is None
        ]
        detail.assignment_count = crud_assignment.count_by_course(db, course_id=course.id)
        if current_student is not None:
            detail.is_enrolled = crud_enrollment.get_by_student_and_course(
                db, student_id=current_student.id, course_id=course.id
            ) is not None
        return detail


course_service = CourseService()
