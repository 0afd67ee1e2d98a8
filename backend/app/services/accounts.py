from __future__ import annotations

import logging
import re

from passlib.context import CryptContext

from app.core.config import settings
from app.core.errors import ForbiddenError, InvalidInputError, NotFoundError, UnauthorizedError
from app.db.repositories import UserRepository
from app.models.user import ADMIN_CATEGORY, CURRICULUM_TRACKS, User

log = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Unknown hash format, e.g. a legacy record.
        return False


def register_user(repo: UserRepository, *, email: str, password: str, name: str, category: str) -> User:
    email = (email or "").strip()
    name = (name or "").strip()
    if not email or not password or not name or not category:
        raise InvalidInputError("all fields are required")
    if not EMAIL_RE.match(email):
        raise InvalidInputError("invalid email format")
    if len(password) < int(settings.password_min_length or 0):
        raise InvalidInputError(f"password must be at least {settings.password_min_length} characters")
    if category not in CURRICULUM_TRACKS:
        raise InvalidInputError("unknown category")

    with repo.locked():
        users = repo.load_all()
        if any(u.email == email for u in users):
            raise InvalidInputError("user already exists")
        user = User(email=email, password=hash_password(password), name=name, category=category)
        users.append(user)
        repo.save_all(users)

    log.info("user registered user_id=%s category=%s", user.id, category)
    return user


def authenticate(repo: UserRepository, *, email: str, password: str) -> User:
    if not email or not password:
        raise InvalidInputError("email and password are required")

    user = next((u for u in repo.load_all() if u.email == email), None)
    if user is None or not verify_password(password, user.password):
        raise UnauthorizedError("invalid credentials")
    if not user.validated:
        raise ForbiddenError("account pending validation, please wait for admin approval")
    return user


def change_password(repo: UserRepository, user_id: str, *, current_password: str, new_password: str) -> None:
    if not new_password or len(new_password) < int(settings.password_min_length or 0):
        raise InvalidInputError(f"password must be at least {settings.password_min_length} characters")

    with repo.locked():
        users = repo.load_all()
        user = next((u for u in users if u.id == user_id), None)
        if user is None:
            raise NotFoundError("user not found")
        if not current_password or not verify_password(current_password, user.password):
            raise UnauthorizedError("invalid credentials")
        user.password = hash_password(new_password)
        repo.save_all(users)


def get_user(repo: UserRepository, user_id: str) -> User | None:
    return next((u for u in repo.load_all() if u.id == user_id), None)


def pending_users(repo: UserRepository) -> list[User]:
    return [u for u in repo.load_all() if not u.validated]


def validate_user(repo: UserRepository, user_id: str) -> User:
    if not user_id:
        raise InvalidInputError("user id required")

    with repo.locked():
        users = repo.load_all()
        user = next((u for u in users if u.id == user_id), None)
        if user is None:
            raise NotFoundError("user not found")
        user.validated = True
        repo.save_all(users)

    log.info("user validated user_id=%s", user.id)
    return user


def ensure_default_admin(repo: UserRepository) -> User | None:
    with repo.locked():
        users = repo.load_all()
        if users:
            return None
        admin = User(
            email=settings.default_admin_email,
            password=hash_password(settings.default_admin_password),
            name="Administrateur",
            category=ADMIN_CATEGORY,
            validated=True,
        )
        repo.save_all([admin])

    log.warning("default admin account created email=%s, change its password after first login", admin.email)
    return admin
