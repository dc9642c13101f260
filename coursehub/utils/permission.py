from fastapi import HTTPException, status

from coursehub.core.constants import AdminRoleEnum
from coursehub.models.admin import Admin
from coursehub.models.course import Course


class PermissionHelper:
    @staticmethod
    def is_admin(staff: Admin) -> bool:
        return staff.role == AdminRoleEnum.ADMIN

    @staticmethod
    def is_tutor(staff: Admin) -> bool:
        return staff.role == AdminRoleEnum.TUTOR

    @staticmethod
    def is_tutor_of_course(staff: Admin, course: Course) -> bool:
        return staff.id in (course.creator_id, course.tutor_id)

    @staticmethod
    def can_manage_course(staff: Admin, course: Course) -> bool:
        if PermissionHelper.is_admin(staff):
            return True
        return PermissionHelper.is_tutor(staff) and PermissionHelper.is_tutor_of_course(staff, course)

    @staticmethod
    def require_course_management_permission(staff: Admin, course: Course):
        if not PermissionHelper.can_manage_course(staff, course):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to manage this course."
            )


permission_helper = PermissionHelper()
