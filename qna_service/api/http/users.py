from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from qna_service.core.auth import get_current_user
from qna_service.core.db import get_db
from qna_service.domains.identity.entities import User
from qna_service.domains.identity.schemas import UserResponse
from qna_service.domains.identity.services import IdentityService

router = APIRouter(prefix="/users", tags=["users"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        uuid=user.uuid,
        email=user.email,
        username=user.username,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Получение данных текущего пользователя"""
    return _user_response(current_user)


@router.get("/{user_uuid}", response_model=UserResponse)
async def get_user(
    user_uuid: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Получение информации о пользователе"""
    identity_service = IdentityService(db)

    user = await identity_service.get_user_by_uuid(user_uuid)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return _user_response(user)
