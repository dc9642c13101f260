import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.constants import AdminRoleEnum
from coursehub.core.security import create_access_token, get_password_hash, verify_password
from coursehub.crud.admin import admin as crud_admin
from coursehub.models.admin import Admin
from coursehub.schemas.admin import Admin as AdminSchema, AdminCreate, AdminLoginResponse, BootstrapAdminRequest
from coursehub.schemas.token import Token
from coursehub.utils.dates import utcnow

logger = logging.getLogger(__name__)


class AuthService:
    """Staff (admin and tutor) accounts. Staff credentials carry no session marker."""

    def _create_staff(self, db: Session, admin_in: AdminCreate, role: AdminRoleEnum) -> Admin:
        if crud_admin.get_by_email(db, email=admin_in.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A staff account with this email already exists."
            )

        return crud_admin.create(
            db,
            obj_in={
                "email": admin_in.email.lower(),
                "first_name": admin_in.first_name,
                "last_name": admin_in.last_name,
                "hashed_password": get_password_hash(admin_in.password),
                "role": role,
                "is_active": True,
            },
        )

    def bootstrap_admin(self, db: Session, *, admin_in: BootstrapAdminRequest) -> AdminSchema:
        if crud_admin.count(db) > 0:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="An administrator already exists."
            )
        if settings.BOOTSTRAP_ADMIN_SECRET and admin_in.bootstrap_secret != settings.BOOTSTRAP_ADMIN_SECRET:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid bootstrap secret.")

        new_admin = self._create_staff(db, admin_in, AdminRoleEnum.ADMIN)
        logger.info("Bootstrapped first administrator %s", new_admin.email)
        return AdminSchema.model_validate(new_admin)

    def create_tutor(self, db: Session, *, tutor_in: AdminCreate) -> AdminSchema:
        tutor = self._create_staff(db, tutor_in, AdminRoleEnum.TUTOR)
        return AdminSchema.model_validate(tutor)

    def login(self, db: Session, *, email: str, password: str) -> AdminLoginResponse:
        admin = crud_admin.get_by_email(db, email=email)
        if not admin or not verify_password(password, admin.hashed_password):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

        if not admin.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated.")

        admin = crud_admin.update(db, db_obj=admin, obj_in={"last_login_at": utcnow()})
        access_token = create_access_token(data={"type": "admin"}, subject=str(admin.id))

        return AdminLoginResponse(
            user=AdminSchema.model_validate(admin),
            token=Token(access_token=access_token, token_type="bearer"),
        )


auth_service = AuthService()
