"""Shared FastAPI dependencies."""

from fastapi import Depends, Header, HTTPException, Request, status

from food_diary.containers import AppContainer
from food_diary.domain.errors import InvalidOrExpiredTokenError
from food_diary.domain.models import PublicUser


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


async def require_user(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> PublicUser:
    """Resolve the caller from a bearer session token.

    A missing token is 401; a token that fails validation is 403.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return container.token_service.session_user(token)
    except InvalidOrExpiredTokenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token"
        ) from None
