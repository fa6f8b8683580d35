import uuid

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.config import settings
from review_sync.database import get_db
from review_sync.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def decode_operator_token(token: str) -> uuid.UUID:
    """Return the user id carried in the ``sub`` claim of *token*."""
    if not settings.JWT_SECRET_KEY:
        raise HTTPException(status_code=500, detail="Operator authentication is not configured")
    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return uuid.UUID(str(claims["sub"]))
    except (JWTError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = decode_operator_token(credentials.credentials)
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")
    return user
