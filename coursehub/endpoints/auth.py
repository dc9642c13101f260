from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.crud.admin import admin as crud_admin
from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.admin import Admin, AdminCreate, AdminLoginResponse, BootstrapAdminRequest
from coursehub.schemas.response import APIResponse
from coursehub.schemas.student import LoginRequest
from coursehub.services.auth import auth_service
from coursehub.utils import deps
from coursehub.utils.cookies import clear_auth_cookie, set_auth_cookie

router = APIRouter()


@router.post("/bootstrap-admin", response_model=APIResponse[Admin], status_code=status.HTTP_201_CREATED)
def bootstrap_admin(
    *,
    db: Session = Depends(deps.get_transactional_db),
    admin_in: BootstrapAdminRequest
):
    """Creates the first administrator. Refused once any admin exists."""
    new_admin = auth_service.bootstrap_admin(db, admin_in=admin_in)
    return APIResponse(message="Administrator created successfully", data=new_admin)


@router.post("/login", response_model=APIResponse[AdminLoginResponse])
def login(
    *,
    db: Session = Depends(deps.get_db),
    login_in: LoginRequest,
    response: Response
):
    login = auth_service.login(db, email=login_in.email, password=login_in.password)
    set_auth_cookie(response, settings.ADMIN_COOKIE_NAME, login.token.access_token)
    return APIResponse(message="Login successful", data=login)


@router.post("/logout", response_model=APIResponse[None])
def logout(response: Response):
    clear_auth_cookie(response, settings.ADMIN_COOKIE_NAME)
    return APIResponse(message="Logged out successfully")


@router.get("/me", response_model=APIResponse[Admin])
def read_me(current_admin: AdminModel = Depends(deps.get_current_admin)):
    return APIResponse(message="Profile retrieved successfully", data=Admin.model_validate(current_admin))


@router.post("/tutors", response_model=APIResponse[Admin], status_code=status.HTTP_201_CREATED)
def create_tutor(
    *,
    db: Session = Depends(deps.get_transactional_db),
    tutor_in: AdminCreate,
    current_admin: AdminModel = Depends(deps.require_admin)
):
    tutor = auth_service.create_tutor(db, tutor_in=tutor_in)
    return APIResponse(message="Tutor created successfully", data=tutor)


@router.get("/tutors", response_model=APIResponse[List[Admin]])
def list_tutors(
    *,
    db: Session = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100,
    current_admin: AdminModel = Depends(deps.require_admin)
):
    tutors = crud_admin.get_tutors(db, skip=skip, limit=limit)
    return APIResponse(message="Tutors retrieved successfully", data=[Admin.model_validate(t) for t in tutors])
