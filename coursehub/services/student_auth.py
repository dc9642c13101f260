import logging
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from coursehub.core.constants import AuthProviderEnum, UploadKindEnum
from coursehub.core.security import (
    create_access_token,
    generate_session_marker,
    get_password_hash,
    verify_password,
)
from coursehub.crud.student import student as crud_student
from coursehub.models.student import Student
from coursehub.schemas.student import (
    ChangePasswordRequest,
    OAuthLoginRequest,
    OAuthRegisterRequest,
    Student as StudentSchema,
    StudentLoginResponse,
    StudentRegister,
    StudentUpdate,
)
from coursehub.schemas.token import Token
from coursehub.services.cloudinary import cloudinary_service
from coursehub.services.oauth import oauth_service
from coursehub.services.session_guard import decode_credential

logger = logging.getLogger(__name__)


class StudentAuthService:

    def _issue_session(self, db: Session, student: Student, client_ip: Optional[str]) -> StudentLoginResponse:
        """Start a new session, invalidating any credential issued before."""
        marker = generate_session_marker()
        crud_student.start_session(db, student_id=student.id, marker=marker, client_ip=client_ip)
        db.refresh(student)

        access_token = create_access_token(data={"type": "student", "sid": marker}, subject=str(student.id))
        logger.info("Student %s signed in from %s", student.id, client_ip or "unknown address")
        return StudentLoginResponse(
            user=StudentSchema.model_validate(student),
            token=Token(access_token=access_token, token_type="bearer"),
        )

    def _check_can_sign_in(self, student: Student) -> None:
        if student.blocked:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Your account has been blocked. Please contact support."
            )
        if not student.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated.")

    async def _verify_identity(self, provider: str, token: str) -> dict:
        identity = await oauth_service.verify(provider, token)
        if not identity:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Could not verify your {provider} account."
            )
        return identity

    def register(self, db: Session, *, student_in: StudentRegister, client_ip: Optional[str]) -> StudentLoginResponse:
        if crud_student.get_by_email(db, email=student_in.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An account with this email already exists."
            )

        student_data = student_in.model_dump(exclude={"password"})
        student_data["email"] = student_in.email.lower()
        student_data["hashed_password"] = get_password_hash(student_in.password)
        student_data["auth_provider"] = AuthProviderEnum.EMAIL
        new_student = crud_student.create(db, obj_in=student_data)

        return self._issue_session(db, new_student, client_ip)

    def login(self, db: Session, *, email: str, password: str, client_ip: Optional[str]) -> StudentLoginResponse:
        student = crud_student.get_by_email(db, email=email)
        if not student:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

        if not student.has_password:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"This account uses {student.auth_provider.value} sign-in. Please use social login."
            )

        if not verify_password(password, student.hashed_password):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

        self._check_can_sign_in(student)
        return self._issue_session(db, student, client_ip)

    async def oauth_login(self, db: Session, *, login_in: OAuthLoginRequest, client_ip: Optional[str]) -> StudentLoginResponse:
        identity = await self._verify_identity(login_in.provider, login_in.token)

        student = crud_student.get_by_email(db, email=identity["email"])
        if not student:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Account not found. Please register first."
            )

        self._check_can_sign_in(student)
        if not student.avatar and identity.get("avatar"):
            crud_student.update(db, db_obj=student, obj_in={"avatar": identity["avatar"]})
        return self._issue_session(db, student, client_ip)

    async def oauth_register(
        self, db: Session, *, register_in: OAuthRegisterRequest, client_ip: Optional[str]
    ) -> StudentLoginResponse:
        identity = await self._verify_identity(register_in.provider, register_in.token)

        if crud_student.get_by_email(db, email=identity["email"]):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An account with this email already exists. Please login instead."
            )

        new_student = crud_student.create(
            db,
            obj_in={
                "email": identity["email"],
                "first_name": register_in.first_name or identity["first_name"],
                "last_name": register_in.last_name or identity["last_name"],
                "avatar": identity.get("avatar"),
                "hashed_password": None,
                "auth_provider": AuthProviderEnum(register_in.provider),
                # The provider has already confirmed the address.
                "is_verified": True,
            },
        )
        return self._issue_session(db, new_student, client_ip)

    def logout(self, db: Session, *, token: Optional[str]) -> bool:
        """End the session the token belongs to, if it is still the live one."""
        payload = decode_credential(token) if token else None
        if payload is None or payload.type != "student" or not payload.sid or not payload.sub.isdigit():
            return False

        ended = crud_student.end_session(db, student_id=int(payload.sub), marker=payload.sid)
        if not ended:
            logger.info("Logout for student %s ignored: session already replaced", payload.sub)
        return ended

    def update_profile(self, db: Session, *, student: Student, student_in: StudentUpdate) -> StudentSchema:
        updated = crud_student.update(db, db_obj=student, obj_in=student_in)
        return StudentSchema.model_validate(updated)

    def change_password(
        self, db: Session, *, student: Student, password_in: ChangePasswordRequest, client_ip: Optional[str]
    ) -> StudentLoginResponse:
        if not student.has_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This account signs in with a social provider and has no password to change."
            )
        if not verify_password(password_in.current_password, student.hashed_password):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect.")

        crud_student.update(db, db_obj=student, obj_in={"hashed_password": get_password_hash(password_in.new_password)})
        # Other devices are signed out; the caller gets a fresh credential.
        return self._issue_session(db, student, client_ip)

    async def upload_avatar(self, db: Session, *, student: Student, file: UploadFile) -> StudentSchema:
        result = await cloudinary_service.upload(UploadKindEnum.IMAGE, file)
        updated = crud_student.update(db, db_obj=student, obj_in={"avatar": result.url})
        return StudentSchema.model_validate(updated)


student_auth_service = StudentAuthService()
