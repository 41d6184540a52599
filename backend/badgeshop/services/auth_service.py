from typing import Dict, Optional

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from badgeshop.models.user import User
from badgeshop.repositories.user_repo import UserRepository
from badgeshop.utils.log import get_logger
from badgeshop.utils.security import (
    create_access_token,
    create_reset_token,
    decode_token,
    hash_password,
    verify_password,
)

log = get_logger("auth")


class AuthError(Exception):
    """Base class for account failures; `status_code` is the HTTP status the route answers with."""

    status_code = 400


class InvalidCredentials(AuthError):
    status_code = 401


class DuplicateEmail(AuthError):
    status_code = 409


class UserNotFound(AuthError):
    status_code = 404


def user_profile(user: User) -> Dict:
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "name": user.full_name,
        "email": user.email or "",
        "address": user.address or "",
        "city": user.city or "",
        "postalCode": user.postal_code or "",
        "country": user.country or "",
        "role": user.role or "customer",
        "profileImageUrl": user.profile_image_url,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def register(self, first_name: str, last_name: str, email: str, password: str) -> User:
        log.info(f"Registration attempt: {email}")
        if self.users.get_by_email(email):
            raise DuplicateEmail("Email already registered")
        try:
            user = self.users.create(first_name, last_name, email, hash_password(password))
            self.db.commit()
        except IntegrityError as e:
            # a concurrent registration won the unique index
            self.db.rollback()
            raise DuplicateEmail("Email already registered") from e
        self.db.refresh(user)
        log.info(f"User registered successfully: {user.id}")
        return user

    def login(self, email: str, password: str) -> Dict:
        log.info(f"Login attempt for: {email}")
        user = self.users.get_by_email(email)
        if not user or not verify_password(password, user.password):
            raise InvalidCredentials("Invalid credentials")
        log.info(f"User authenticated successfully: {user.id}")
        return {
            "message": "Login successful",
            "userId": user.id,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "email": user.email,
            "role": user.role,
            "accessToken": create_access_token(user.id, user.role),
            "tokenType": "bearer",
        }

    def update_profile(
        self,
        user_id,
        first_name: str,
        last_name: str,
        email: str,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> User:
        if new_password and not current_password:
            raise AuthError("Current password is required to set a new password")
        user = self.users.get(user_id)
        if not user:
            raise UserNotFound("User not found")
        if new_password and not verify_password(current_password, user.password):
            raise InvalidCredentials("Current password is incorrect")
        other = self.users.get_by_email(email)
        if other and other.id != user.id:
            raise DuplicateEmail("Email already registered")

        user.first_name = first_name
        user.last_name = last_name
        user.email = email
        if new_password:
            user.password = hash_password(new_password)
        self.db.commit()
        self.db.refresh(user)
        log.info(f"Updated profile for user {user.id} (password changed: {bool(new_password)})")
        return user

    def set_profile_image(self, user_id, image_url: str) -> User:
        user = self.users.get(user_id)
        if not user:
            raise UserNotFound("User not found")
        user.profile_image_url = image_url
        self.db.commit()
        return user

    def request_password_reset(self, email: str) -> Optional[str]:
        """
        Issue a reset token for a known email. Returns None for unknown addresses;
        the caller answers identically either way.
        """
        user = self.users.get_by_email(email)
        if not user:
            log.info(f"Password reset requested for unknown email: {email}")
            return None
        token = create_reset_token(user.id, user.email)
        # no mail transport configured; the link is logged for the operator
        log.info(f"Password reset link for {email}: /account/reset-password?token={token}")
        return token

    def reset_password(self, token: str, new_password: str) -> User:
        try:
            payload = decode_token(token, purpose="password-reset")
        except jwt.PyJWTError as e:
            raise AuthError("Invalid or expired reset token") from e
        user = self.users.get(payload.get("sub"))
        if not user or user.email != payload.get("email"):
            raise AuthError("Invalid or expired reset token")
        user.password = hash_password(new_password)
        self.db.commit()
        return user
