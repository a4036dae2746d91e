from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.security import extract_user_id
from app.core.exceptions import UnauthorizedException
from app.database import get_db
from app.repositories.user_repository import UserRepository
from app.models.user import User

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency resolving the bearer token to a User.

    The token's 'sub' claim is the auth service's user id. A first request
    with a valid token provisions the User row. Deactivated users are
    rejected even with a valid token.

    Raises:
        HTTPException 401: If token invalid, expired, or the user is inactive
    """
    try:
        auth_user_id = extract_user_id(credentials.credentials)

        user = UserRepository(db).get_or_create_by_auth_id(auth_user_id)
        if not user.active:
            raise UnauthorizedException("User account is inactive")

        return user

    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
