"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from animalsos.core.security import hash_password, verify_password
from animalsos.domain.entities import User, UserCreate, UserPatch, UserRole
from animalsos.repositories.base import Storage

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class RegistrationError(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class UserNotFoundError(AuthError):
    pass


@dataclass
class AuthService:
    """Handles registration, login and profile changes that touch identity fields."""

    storage: Storage

    def _ensure_available(self, username: str | None, email: str | None, *, exclude_id: int | None = None) -> None:
        if username:
            existing = self.storage.get_user_by_username(username)
            if existing and existing.id != exclude_id:
                raise AccountExistsError("Username already exists")
        if email:
            existing = self.storage.get_user_by_email(email)
            if existing and existing.id != exclude_id:
                raise AccountExistsError("Email already registered")

    @staticmethod
    def _clean_username(username: str) -> str:
        username = username.strip()
        if not username:
            raise RegistrationError("Username is required")
        return username

    def register(self, payload: UserCreate, *, allow_role: bool = False) -> User:
        """Create an account with a hashed password.

        Self-registration always yields a plain ``user``; only an admin
        (``allow_role=True``) may pick another role.
        """
        username = self._clean_username(payload.username)
        email = payload.email.strip().lower()
        if len(payload.password or "") < MIN_PASSWORD_LENGTH:
            raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        self._ensure_available(username, email)
        role = payload.role if allow_role else UserRole.USER
        return self.storage.create_user(
            payload.model_copy(
                update={
                    "username": username,
                    "email": email,
                    "password": hash_password(payload.password),
                    "role": UserRole(role).value,
                }
            )
        )

    def authenticate(self, username: str, password: str) -> User:
        user = self.storage.get_user_by_username((username or "").strip())
        if not user or not verify_password(password or "", user.password):
            logger.warning("Failed login for username %r", username)
            raise InvalidCredentialsError("Invalid username or password")
        return user

    def update_profile(self, user_id: int, patch: UserPatch) -> User:
        changes = patch.changes()
        if "username" in changes:
            changes["username"] = self._clean_username(changes["username"])
        if "email" in changes and changes["email"]:
            changes["email"] = changes["email"].strip().lower()
        self._ensure_available(changes.get("username"), changes.get("email"), exclude_id=user_id)
        if changes.get("password"):
            if len(changes["password"]) < MIN_PASSWORD_LENGTH:
                raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
            changes["password"] = hash_password(changes["password"])
        updated = self.storage.update_user(user_id, UserPatch(**changes))
        if updated is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return updated

    def get_user(self, user_id: Optional[int]) -> Optional[User]:
        if user_id is None:
            return None
        return self.storage.get_user(user_id)
