"""
User Service - registration, login and profile lookup.
"""

from typing import Dict
import logging

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.exceptions import (
    ConflictError,
    InvalidCredentialError,
    NotFoundError,
    ValidationError,
)
from app.models.enums import UserRole
from app.models.tables import User, Ward
from app.models.user import CurrentUser, RegisterRequest
from app.utils.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user management.

    Role and ward assignment are fixed at registration; there is no edit path.
    """

    def __init__(self, db: Session):
        self.db = db

    def register(self, request: RegisterRequest) -> User:
        """
        Create a user with a bcrypt-hashed password.

        Raises:
            ValidationError: ward officer without a ward, or unknown ward
            ConflictError: email already registered
        """
        if request.role == UserRole.WARD_OFFICER and request.ward_id is None:
            raise ValidationError("Ward officers must be assigned a ward")

        if request.ward_id is not None and self.db.get(Ward, request.ward_id) is None:
            raise ValidationError(f"Ward {request.ward_id} does not exist")

        user = User(
            name=request.name,
            email=request.email.lower(),
            hashed_password=get_password_hash(request.password),
            role=request.role,
            ward_id=request.ward_id,
        )

        # Uniqueness is enforced by the users.email constraint, not a pre-check
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Registration rejected, email already exists: {request.email}")
            raise ConflictError("Email already exists")

        self.db.refresh(user)
        logger.info(f"User registered: {user.id} ({user.role.value})")
        return user

    def login(self, email: str, password: str) -> Dict:
        """
        Verify credentials and issue a bearer token.

        Returns:
            {"token": ..., "user": {id, name, email, role}}
        """
        user = self.db.query(User).filter(User.email == email.lower()).first()
        if user is None:
            raise NotFoundError("User not found")

        if not verify_password(password, user.hashed_password):
            raise InvalidCredentialError("Invalid password")

        token = create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role.value,
            ward_id=user.ward_id,
        )

        logger.info(f"User authenticated: {user.id}")
        return {
            "token": token,
            "user": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "role": user.role.value,
            },
        }

    def get_profile(self, identity: CurrentUser) -> Dict:
        user = self.db.get(User, identity.id)
        if user is None:
            raise NotFoundError("User not found")

        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
            "ward_id": user.ward_id,
        }


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)
