from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hrms.core.errors import AuthenticationFailed, NotFoundError, PermissionDenied
from hrms.core.logging import get_logger
from hrms.core.security import decode_access_token
from hrms.db.session import get_session
from hrms.models import Employee, User

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

STAFF_ROLES = ("admin", "hr")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> User:
    if credentials is None:
        raise AuthenticationFailed("No token, authorization denied")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        logger.warning("token_rejected")
        raise AuthenticationFailed("Token is not valid")

    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise AuthenticationFailed("Token is not valid")

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationFailed("Token is not valid")
    if not user.is_active:
        raise AuthenticationFailed("Account is deactivated")
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDenied(f"User role {user.role} is not authorized to access this route")
        return user

    return dependency


def is_staff(user: User) -> bool:
    return user.role in STAFF_ROLES


def find_employee_for_user(db: Session, user: User) -> Optional[Employee]:
    return db.query(Employee).filter(Employee.user_id == user.id).one_or_none()


def get_current_employee(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> Employee:
    employee = find_employee_for_user(db, user)
    if employee is None:
        raise NotFoundError("Employee record not found")
    return employee
