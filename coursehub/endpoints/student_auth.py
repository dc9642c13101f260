from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.models.student import Student as StudentModel
from coursehub.schemas.response import APIResponse
from coursehub.schemas.student import (
    ChangePasswordRequest,
    LoginRequest,
    OAuthLoginRequest,
    OAuthRegisterRequest,
    Student,
    StudentLoginResponse,
    StudentRegister,
    StudentUpdate,
)
from coursehub.services.session_guard import extract_credential
from coursehub.services.student_auth import student_auth_service
from coursehub.utils import deps
from coursehub.utils.cookies import clear_auth_cookie, set_auth_cookie

router = APIRouter()


def _client_ip(request: Request):
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _signed_in(response: Response, login: StudentLoginResponse) -> StudentLoginResponse:
    set_auth_cookie(response, settings.STUDENT_COOKIE_NAME, login.token.access_token)
    return login


@router.post("/register", response_model=APIResponse[StudentLoginResponse], status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(deps.get_db),
    student_in: StudentRegister,
    request: Request,
    response: Response
):
    login = student_auth_service.register(db, student_in=student_in, client_ip=_client_ip(request))
    return APIResponse(message="Registration successful", data=_signed_in(response, login))


@router.post("/login", response_model=APIResponse[StudentLoginResponse])
def login(
    *,
    db: Session = Depends(deps.get_db),
    login_in: LoginRequest,
    request: Request,
    response: Response
):
    login = student_auth_service.login(
        db, email=login_in.email, password=login_in.password, client_ip=_client_ip(request)
    )
    return APIResponse(message="Login successful", data=_signed_in(response, login))


@router.post("/oauth/login", response_model=APIResponse[StudentLoginResponse])
async def oauth_login(
    *,
    db: Session = Depends(deps.get_db),
    login_in: OAuthLoginRequest,
    request: Request,
    response: Response
):
    login = await student_auth_service.oauth_login(db, login_in=login_in, client_ip=_client_ip(request))
    return APIResponse(message="Login successful", data=_signed_in(response, login))


@router.post("/oauth/register", response_model=APIResponse[StudentLoginResponse], status_code=status.HTTP_201_CREATED)
async def oauth_register(
    *,
    db: Session = Depends(deps.get_db),
    register_in: OAuthRegisterRequest,
    request: Request,
    response: Response
):
    login = await student_auth_service.oauth_register(db, register_in=register_in, client_ip=_client_ip(request))
    return APIResponse(message="Registration successful", data=_signed_in(response, login))


@router.post("/logout", response_model=APIResponse[None])
def logout(
    *,
    db: Session = Depends(deps.get_db),
    request: Request,
    response: Response
):
    student_auth_service.logout(db, token=extract_credential(request))
    clear_auth_cookie(response, settings.STUDENT_COOKIE_NAME)
    return APIResponse(message="Logged out successfully")


@router.get("/me", response_model=APIResponse[Student])
def read_me(current_student: StudentModel = Depends(deps.get_current_student)):
    return APIResponse(message="Profile retrieved successfully", data=Student.model_validate(current_student))


@router.put("/profile", response_model=APIResponse[Student])
def update_profile(
    *,
    db: Session = Depends(deps.get_db),
    student_in: StudentUpdate,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    student = student_auth_service.update_profile(db, student=current_student, student_in=student_in)
    return APIResponse(message="Profile updated successfully", data=student)


@router.put("/change-password", response_model=APIResponse[StudentLoginResponse])
def change_password(
    *,
    db: Session = Depends(deps.get_db),
    password_in: ChangePasswordRequest,
    request: Request,
    response: Response,
    current_student: StudentModel = Depends(deps.get_current_student)
):
    login = student_auth_service.change_password(
        db, student=current_student, password_in=password_in, client_ip=_client_ip(request)
    )
    return APIResponse(message="Password changed successfully", data=_signed_in(response, login))


@router.post("/avatar", response_model=APIResponse[Student])
async def upload_avatar(
    *,
    db: Session = Depends(deps.get_db),
    file: UploadFile = File(...),
    current_student: StudentModel = Depends(deps.get_current_student)
):
    student = await student_auth_service.upload_avatar(db, student=current_student, file=file)
    return APIResponse(message="Avatar updated successfully", data=student)
