"""User router - FastAPI endpoints for staff accounts"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...access import Capability
from ...auth import AuthSession, get_current_session, require_capability
from ...database import get_db
from .schemas import MeResponse, UserCreate, UserResponse, UserUpdate
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

owner_only = require_capability(Capability.MANAGE_USERS)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.get("/me", response_model=MeResponse)
async def get_me(session: AuthSession = Depends(get_current_session)):
    """The authenticated principal and what it may do"""
    return MeResponse(
        id=session.user_id,
        name=session.name,
        email=session.email,
        role=session.role,
        capabilities=session.capabilities,
        expiresAt=session.expires_at,
    )


@router.get("", response_model=list[UserResponse])
async def list_users(
    _session: AuthSession = Depends(owner_only),
    service: UserService = Depends(get_user_service),
):
    return [UserResponse.model_validate(u) for u in service.get_users()]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    _session: AuthSession = Depends(owner_only),
    service: UserService = Depends(get_user_service),
):
    """Create a staff account"""
    return UserResponse.model_validate(service.create_user(data))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    session: AuthSession = Depends(owner_only),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.model_validate(service.update_user(user_id, data, session))


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    session: AuthSession = Depends(owner_only),
    service: UserService = Depends(get_user_service),
):
    service.delete_user(user_id, session)
    return Response(status_code=204)
