from fastapi import Depends, HTTPException, status

from acadtrack.core.current_user import get_current_user
from acadtrack.models.user import User


def _require_role(current_user: User, role: str) -> User:
    if current_user.role != role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{role.capitalize()} role required",
        )
    return current_user


def require_faculty(current_user: User = Depends(get_current_user)) -> User:
    return _require_role(current_user, "faculty")


def require_student(current_user: User = Depends(get_current_user)) -> User:
    return _require_role(current_user, "student")
