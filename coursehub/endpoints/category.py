from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.models.admin import Admin as AdminModel
from coursehub.schemas.category import Category, CategoryCreate
from coursehub.schemas.response import APIResponse
from coursehub.services.category import category_service
from coursehub.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[Category]])
def list_categories(db: Session = Depends(deps.get_db)):
    return APIResponse(message="Categories retrieved successfully", data=category_service.list_categories(db))


@router.post("", response_model=APIResponse[Category], status_code=status.HTTP_201_CREATED)
def create_category(
    *,
    db: Session = Depends(deps.get_transactional_db),
    category_in: CategoryCreate,
    current_admin: AdminModel = Depends(deps.require_admin)
):
    category = category_service.create_category(db, category_in=category_in)
    return APIResponse(message="Category created successfully", data=category)
