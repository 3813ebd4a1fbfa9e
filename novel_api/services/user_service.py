"""
User service
"""

import logging
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from novel_api.core.database import users_collection
from novel_api.core.exceptions import Conflict, Unauthorized, ValidationError
from novel_api.core.security import (
    TOKEN_ERROR_MESSAGE,
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_token,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
LOGIN_ERROR_MESSAGE = "Invalid email or password."


def get_user_by_email(db: Database, email: str) -> Optional[Dict[str, Any]]:
    """Find a user by email"""
    return users_collection(db).find_one({"email": email})


def get_user_by_username(db: Database, username: str) -> Optional[Dict[str, Any]]:
    """Find a user by username"""
    return users_collection(db).find_one({"username": username})


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_registration(username: str, email: str, password: str) -> None:
    """Collect every field problem before reporting"""
    errors: Dict[str, str] = {}
    if not username or not username.strip():
        errors["username"] = "Username is required and must be a non-empty string"
    if not email or not _is_valid_email(email):
        errors["email"] = "Valid email is required"
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if errors:
        raise ValidationError("Invalid registration data", errors)


def create_user(db: Database, username: str, email: str, password_hash: str) -> str:
    """Insert a user and return its id"""
    result = users_collection(db).insert_one({
        "username": username,
        "email": email,
        "password": password_hash,
    })
    return str(result.inserted_id)


def register(db: Database, username: str, email: str, password: str) -> str:
    """Validate, check uniqueness, hash and store a new account"""
    validate_registration(username, email, password)
    username = username.strip()

    if get_user_by_email(db, email):
        raise Conflict("User already exists")
    if get_user_by_username(db, username):
        raise Conflict("Username is taken")

    try:
        user_id = create_user(db, username, email, get_password_hash(password))
    except DuplicateKeyError:
        # lost a race with a concurrent registration
        raise Conflict("User already exists")
    logger.info(f"New user registered: {username}")
    return user_id


def _claims(user: Dict[str, Any]) -> Dict[str, str]:
    return {"sub": str(user["_id"]), "username": user["username"]}


def login(db: Database, email: str, password: str) -> Dict[str, str]:
    """Check credentials and issue an access/refresh token pair"""
    user = get_user_by_email(db, email) if email else None
    # same error whether the email is unknown or the password is wrong
    if not user or not verify_password(password or "", user.get("password", "")):
        raise Unauthorized(LOGIN_ERROR_MESSAGE)

    claims = _claims(user)
    return {
        "token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
    }


def refresh_access_token(refresh_token: str) -> str:
    """New access token for a valid refresh token"""
    payload = verify_token(refresh_token, "refresh")
    if payload is None or not payload.get("sub"):
        raise Unauthorized(TOKEN_ERROR_MESSAGE)
    return create_access_token(payload)


def ensure_user_indexes(db: Database) -> None:
    """Unique email and username"""
    users = users_collection(db)
    users.create_index("email", unique=True)
    users.create_index("username", unique=True)
