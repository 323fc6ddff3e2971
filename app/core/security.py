import uuid
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models
from app.core.config import Settings
from app.core.database import get_db
from app.core.errors import Unauthenticated

db_dep = Annotated[AsyncSession, Depends(get_db)]
# Hash mechanism
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


settings_dep = Annotated[Settings, Depends(get_app_settings)]


# Hash the password
def hash_password(password: str):
    return pwd_context.hash(password)


# Verify the password
def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, settings: Settings):
    to_encode = data.copy()

    expire_time = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire_time})

    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )

    return encoded_jwt


# tokenUrl="profile/login" if you don't have a token yet, go to this address to get one
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="profile/login")
# Same scheme, but lets the route decide what a missing token means
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="profile/login", auto_error=False)


async def resolve_current_user(
    token: Optional[str], db: AsyncSession, settings: Settings
) -> models.User:
    """
    Turn a bearer token into the user it belongs to.

    Raises Unauthenticated when there is no token, the token is invalid or
    expired, or the user it names no longer exists.
    """
    if not token:
        raise Unauthenticated()

    try:
        # Decode the "Gibberish"
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        user_id = uuid.UUID(str(payload.get("user_id")))

    # Expired, tampered, or missing the user id
    except (jwt.InvalidTokenError, ValueError):
        raise Unauthenticated()

    # Go to the Database and find this specific person
    query = select(models.User).where(models.User.id == user_id)
    result = await db.execute(query)
    user = result.scalars().first()

    if user is None:
        raise Unauthenticated()

    return user


# Decode the token and see who is the user
async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)], db: db_dep, settings: settings_dep
):
    try:
        return await resolve_current_user(token, db, settings)
    except Unauthenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
