"""User service - Business logic for staff accounts and login"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...access import Role
from ...auth import AuthSession
from ...errors import Conflict, Forbidden, NotFound, Unauthorized
from ...models import User
from ...security_utils import hash_password_bcrypt, verify_password_bcrypt
from .repository import UserRepository
from .schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def authenticate(self, email: str, password: str) -> User:
        """One-shot credential check"""
        user = self.repo.get_user_by_email(self.db, email or "")
        if not user or not verify_password_bcrypt(password or "", user.password_hash):
            logger.warning(f"🚫 Failed login for {email}")
            raise Unauthorized("Invalid credentials")

        logger.info(f"✅ Login: {user.email} ({user.role})")
        return user

    def get_users(self) -> list[User]:
        return self.repo.get_users(self.db)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def create_user(self, data: UserCreate) -> User:
        if self.repo.get_user_by_email(self.db, data.email):
            raise Conflict("Email already exists")

        try:
            user = self.repo.create_user(
                self.db,
                name=data.name,
                email=data.email.lower(),
                role=data.role.value,
                password_hash=hash_password_bcrypt(data.password),
            )
        except IntegrityError as e:
            # Email taken between the check and the insert
            self.db.rollback()
            raise Conflict("Email already exists") from e

        logger.info(f"🆕 User created: {user.email} ({user.role})")
        return user

    def update_user(self, user_id: str, data: UserUpdate, actor: AuthSession) -> User:
        user = self.get_user(user_id)

        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.email is not None and data.email != user.email:
            existing = self.repo.get_user_by_email(self.db, data.email)
            if existing and existing.id != user.id:
                raise Conflict("Email already exists")
            updates["email"] = data.email.lower()
        if data.role is not None:
            if user.id == actor.user_id and data.role != Role.OWNER:
                raise Forbidden("Owners cannot remove their own owner role")
            updates["role"] = data.role.value
        if data.password is not None:
            updates["password_hash"] = hash_password_bcrypt(data.password)

        try:
            user = self.repo.update_user(self.db, user, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise Conflict("Email already exists") from e

        logger.info(f"✏️ User {user.id} updated: {sorted(k for k in updates if k != 'password_hash')}")
        return user

    def delete_user(self, user_id: str, actor: AuthSession) -> None:
        user = self.get_user(user_id)
        if user.id == actor.user_id:
            raise Forbidden("You cannot delete your own account")

        self.repo.delete_user(self.db, user)
        logger.info(f"🗑️ User {user_id} deleted by {actor.email}")
