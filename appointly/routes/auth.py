import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import issue_token
from ..database import get_db
from ..domain.users.schemas import LoginRequest, LoginResponse, UserResponse
from ..domain.users.service import UserService
from ..rate_limiter import create_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

login_rate_limit = create_rate_limiter(limit=10, window_seconds=300, key_prefix="login")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(login_rate_limit),
    db: Session = Depends(get_db),
):
    """Exchange email + password for a bearer token"""
    user = UserService(db).authenticate(data.email, data.password)
    return LoginResponse(token=issue_token(user), user=UserResponse.model_validate(user))
