import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .access import Capability, Role, capabilities_for, has_capability
from .database import get_db
from .errors import Forbidden, Unauthorized
from .models import User
from .security_utils import create_access_token, decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass
class AuthSession:
    """The authenticated principal for one request"""

    user_id: str
    email: str
    name: str
    role: Role
    expires_at: Optional[datetime] = None
    capabilities: list[Capability] = field(default_factory=list)

    def can(self, capability: Capability) -> bool:
        return has_capability(self.role, capability)


def issue_token(user: User) -> str:
    """Signed, time-limited assertion for a user who passed the credential check"""
    return create_access_token(
        {"sub": user.id, "email": user.email, "role": user.role, "name": user.name}
    )


def session_for(user: User, expires_at: Optional[datetime] = None) -> AuthSession:
    role = Role(user.role)
    return AuthSession(
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=role,
        expires_at=expires_at,
        capabilities=capabilities_for(role),
    )


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> AuthSession:
    """Resolve the Bearer token into an AuthSession"""
    if not credentials or not credentials.credentials:
        raise Unauthorized("Missing token")

    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise Unauthorized("Invalid or expired token")

    # Re-read the user so deleted accounts and role changes take effect immediately
    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user:
        logger.warning(f"⚠️ Token for unknown user {payload['sub']}")
        raise Unauthorized("Invalid or expired token")

    try:
        role = Role(user.role)
    except ValueError as e:
        logger.error(f"❌ User {user.id} has unknown role '{user.role}'")
        raise Forbidden() from e

    expires_at = None
    if payload.get("exp"):
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

    logger.debug(f"✅ Authenticated {user.email} as {role.value}")
    return session_for(user, expires_at)


def require_capability(capability: Capability):
    """
    Create a dependency that only lets principals holding `capability` through

    Example usage:
        @router.get("", dependencies=[Depends(require_capability(Capability.MANAGE_USERS))])
    """

    async def checker(session: AuthSession = Depends(get_current_session)) -> AuthSession:
        if not session.can(capability):
            logger.warning(f"🚫 {session.email} ({session.role.value}) lacks '{capability.value}'")
            raise Forbidden()
        return session

    return checker
