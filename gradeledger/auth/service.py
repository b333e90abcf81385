"""Bearer-token verification and role checks for the HTTP surface."""
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import User, UserRole, UserStatus
from ..scope import UNRESTRICTED, AuthorizationScope, RestrictedToInstructor
from .models import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, CurrentUser, TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def create_access_token(user_id: str, email: str, role: UserRole, expires_delta: Optional[timedelta] = None) -> str:
    """Create a new access token."""
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": user_id, "email": email, "role": role.value, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> TokenData:
    """Verify and decode a JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        return TokenData(user_id=user_id, email=payload.get("email"), role=payload.get("role"))
    except (JWTError, ValueError):
        raise credentials_exception


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> CurrentUser:
    """Dependency to get the current user from the JWT token."""
    token_data = verify_token(token)
    user = db.get(User, token_data.user_id)
    if user is None or user.status != UserStatus.active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(user_id=user.id, email=user.email, role=user.role, name=user.name)


def require_staff(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Only admins and teachers may write grades or manage groups."""
    if current_user.role not in (UserRole.admin, UserRole.teacher):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
    return current_user


def scope_for(user: CurrentUser) -> AuthorizationScope:
    """Teachers act only on their own classes; admins act on any."""
    if user.role == UserRole.teacher:
        return RestrictedToInstructor(user.user_id)
    return UNRESTRICTED
