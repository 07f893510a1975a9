import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import SECRET_KEY, ALGORITHM, JWT_AUDIENCE, ACCESS_TOKEN_EXPIRE_MINUTES
from models import Profile, UserRole, get_db
from schemas import TokenData

logger = logging.getLogger(__name__)

# tokens come from the identity provider; there is no login route here
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

# ======================
# TOKEN HELPERS
# ======================


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "aud": JWT_AUDIENCE})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenData:
    payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], audience=JWT_AUDIENCE)
    metadata = payload.get("user_metadata") or {}
    return TokenData(
        user_id=payload.get("sub"),
        email=payload.get("email"),
        display_name=metadata.get("display_name"),
    )

# ======================
# PROFILE LOOKUP
# ======================


def get_profile(db: Session, user_id: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def default_display_name(token_data: TokenData) -> Optional[str]:
    if token_data.display_name:
        return token_data.display_name
    if token_data.email:
        return token_data.email.split("@", 1)[0]
    return None


def get_or_create_profile(db: Session, token_data: TokenData) -> Profile:
    profile = get_profile(db, token_data.user_id)
    if profile:
        return profile

    profile = Profile(
        user_id=token_data.user_id,
        display_name=default_display_name(token_data),
        points=0,
        role="user",
    )
    db.add(profile)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent first request created it
        db.rollback()
        return get_profile(db, token_data.user_id)
    db.refresh(profile)
    logger.info("Created profile for user %s", profile.user_id)
    return profile


def has_role(db: Session, user_id: str, role: str) -> bool:
    return (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role == role)
        .first()
        is not None
    )


def is_admin(db: Session, profile: Profile) -> bool:
    return profile.role == "admin" or has_role(db, profile.user_id, "admin")

# ======================
# DEPENDENCIES
# ======================


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate login. Please sign in again.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        token_data = decode_token(token)
    except (JWTError, ValueError):
        raise credentials_exception
    if not token_data.user_id:
        raise credentials_exception

    return get_or_create_profile(db, token_data)


async def require_admin(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Profile:
    if not is_admin(db, current_user):
        logger.warning("Admin access denied for user %s", current_user.user_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied: Admin only")
    return current_user
