from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.orm import Session

from hrms.api.deps import get_current_user
from hrms.api.fields import Email, RequiredStr
from hrms.api.responses import ok
from hrms.core import clock
from hrms.core.errors import AuthenticationFailed, ConflictError, ValidationFailed
from hrms.core.logging import get_logger
from hrms.core.security import create_access_token, hash_password, verify_password
from hrms.db.session import get_session
from hrms.models import User

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = get_logger(__name__)


class RegisterRequest(BaseModel):
    email: Email
    password: str = Field(..., min_length=6)
    first_name: RequiredStr
    last_name: RequiredStr
    role: Literal["admin", "hr", "employee"] = "employee"


class LoginRequest(BaseModel):
    email: Email
    password: str


class ProfileUpdate(BaseModel):
    email: Optional[Email] = None
    first_name: Optional[RequiredStr] = None
    last_name: Optional[RequiredStr] = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    employee_code: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


def _sanitize(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        employee_code=user.employee_code,
        is_active=user.is_active,
        last_login=user.last_login,
        created_at=user.created_at,
    )


def _find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).one_or_none()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_session)):
    if _find_by_email(db, payload.email):
        raise ConflictError("User already exists with this email")

    user = User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("user_registered", user_id=user.id, role=user.role)
    return ok(
        {"user": _sanitize(user), "token": create_access_token(user.id)},
        message="User registered successfully",
    )


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_session)):
    logger.info("login_attempt", email=payload.email)
    user = _find_by_email(db, payload.email)
    if not user:
        raise AuthenticationFailed("Invalid credentials")
    if not user.is_active:
        raise AuthenticationFailed("Account is deactivated")
    if not verify_password(payload.password, user.hashed_password):
        raise AuthenticationFailed("Invalid credentials")

    user.last_login = clock.utcnow()
    db.commit()
    db.refresh(user)

    logger.info("login_success", user_id=user.id, role=user.role)
    return ok(
        {"user": _sanitize(user), "token": create_access_token(user.id)},
        message="Login successful",
    )


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)):
    return ok({"user": _sanitize(user)})


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes and changes["email"] != user.email:
        if _find_by_email(db, changes["email"]):
            raise ConflictError("User already exists with this email")

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    logger.info("profile_updated", user_id=user.id, fields=sorted(changes))
    return ok({"user": _sanitize(user)}, message="Profile updated successfully")


@router.put("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    if not verify_password(payload.current_password, user.hashed_password):
        raise ValidationFailed("Current password is incorrect")

    user.hashed_password = hash_password(payload.new_password)
    db.commit()

    logger.info("password_changed", user_id=user.id)
    return ok(message="Password changed successfully")
