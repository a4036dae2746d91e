from jose import JWTError, jwt
from app.config import settings
from app.core.exceptions import UnauthorizedException


def decode_jwt(token: str) -> dict:
    """
    Decode a bearer token issued by the auth service.

    The signature is checked against SECRET_KEY with JWT_ALGORITHM; jose
    rejects expired tokens on its own.

    Raises:
        UnauthorizedException: If token invalid, expired, or missing claims
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {e}")

    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")
    if not payload.get("sub"):
        raise UnauthorizedException("Token missing user identifier")

    return payload


def extract_user_id(token: str) -> str:
    """Extract auth_user_id ('sub') from a bearer token"""
    return str(decode_jwt(token)["sub"])
