"""
Access control.

Identifies the caller from a bearer JWT and exposes ``{id, role}`` to
routes. The core trusts this identity and never re-verifies credentials.
"""
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from mockhire.core.config import SECRET_KEY, ALGORITHM
from mockhire.db.models.user import User, UserRole
from mockhire.db.session import get_db
from mockhire.services.user_block_service import ensure_not_blocked

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Resolve the caller from a JWT; the role is read from the user record.
    A user with a block in effect gets a 403 (ForbiddenError) on every route.
    """
    credentials_error = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_error

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_error

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise credentials_error

    ensure_not_blocked(db, user.id)

    return CurrentUser(id=user.id, role=UserRole(user.role))


def require_roles(*roles: UserRole):
    """Dependency factory restricting a route to the given roles."""
    def role_checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(r.value for r in roles)}",
            )
        return current_user

    return role_checker
