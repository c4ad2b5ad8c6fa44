from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException
from passlib.context import CryptContext

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGO, JWT_SECRET
from database import get_document
from lifecycle import Actor
from schemas import Profile, Role, User

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGO)


def get_current_user(authorization: Optional[str] = Header(None)) -> User:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    try:
        scheme, token = authorization.split(" ")
        if scheme.lower() != "bearer":
            raise ValueError("Invalid auth scheme")
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGO])
        user_id = payload.get("sub")
        if not user_id:
            raise ValueError("Invalid token")
    except (ValueError, jwt.PyJWTError) as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")

    doc = get_document("user", user_id)
    if not doc or not doc.get("is_active", True):
        raise HTTPException(status_code=401, detail="Invalid token: User not found")
    return User.model_validate(doc)


def get_current_profile(current_user: User = Depends(get_current_user)) -> Profile:
    doc = get_document("profile", current_user.id)
    if not doc:
        raise HTTPException(status_code=404, detail="Profile not found")
    profile = Profile.model_validate(doc)
    if not profile.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")
    return profile


def get_actor(profile: Profile = Depends(get_current_profile)) -> Actor:
    return Actor(user_id=profile.id, role=profile.role)


def require_roles(*roles: Role):
    """Dependency that only lets the listed roles through."""
    def checker(actor: Actor = Depends(get_actor)) -> Actor:
        if actor.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return actor
    return checker
