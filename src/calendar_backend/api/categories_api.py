"""
Categories API
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from calendar_backend.core.database import get_db
from calendar_backend.core.dependencies import get_current_user
from calendar_backend.models.user import User
from calendar_backend.repositories.category_repository import CategoryRepository
from calendar_backend.schemas.category import CreateCategoryRequest, CategoryResponse
from calendar_backend.schemas.common import MessageResponse

logger = logging.getLogger("CATEGORIES_API")

router = APIRouter(
    prefix="/categories",
    tags=["Categories"]
)


@router.get("", response_model=List[CategoryResponse])
def list_categories(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    repo = CategoryRepository(db)
    return [CategoryResponse.model_validate(category) for category in repo.list_for_owner(user.id)]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    request: CreateCategoryRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    repo = CategoryRepository(db)
    category = repo.create_for_owner(user.id, request.name, request.color)
    logger.info(f"Created category {category.id} for user {user.id}")
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    repo = CategoryRepository(db)
    if not repo.delete_for_owner(user.id, category_id):
        logger.info(f"Category {category_id} not found for user {user.id}; nothing deleted")
    return MessageResponse(message="Category deleted")
