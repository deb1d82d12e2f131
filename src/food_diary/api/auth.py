"""Account endpoints: signup, verification, login and password reset."""

from html import escape

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse

from food_diary.api.dependencies import get_container
from food_diary.api.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
)
from food_diary.containers import AppContainer
from food_diary.domain.errors import InvalidOrExpiredTokenError, ValidationError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    """Register a user; a verification email is sent in the background."""
    message = await container.account_service.signup(
        body.email or "", body.password or "", body.name
    )
    return {"message": message}


@router.get("/verify/{token}", response_class=HTMLResponse)
async def verify(
    token: str, container: AppContainer = Depends(get_container)
) -> HTMLResponse:
    """Confirm an email address from the link in the verification email."""
    try:
        user = container.account_service.verify(token)
    except InvalidOrExpiredTokenError as exc:
        return HTMLResponse(
            _page("Verification failed", exc.message),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return HTMLResponse(
        _page(
            "Email verified",
            f"Thanks {escape(user.display_name)}, your account is ready. "
            "You can now log in.",
        )
    )


@router.post("/login")
def login(
    body: LoginRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Exchange credentials for a session token.

    Plain ``def`` so password hashing runs in the threadpool.
    """
    result = container.account_service.login(body.email or "", body.password or "")
    return {"token": result.token, "user": result.user.as_dict()}


@router.post("/forgot-password")
async def forgot_password(
    body: ForgotPasswordRequest, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    """Request a reset link; the reply is identical for unknown emails."""
    message = await container.account_service.forgot_password(body.email or "")
    return {"message": message}


@router.post("/reset-password")
def reset_password(
    body: ResetPasswordRequest, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    """Set a new password using a reset token."""
    if not body.token or not body.new_password:
        raise ValidationError("Token and new password are required")
    message = container.account_service.reset_password(body.token, body.new_password)
    return {"message": message}


def _page(title: str, text: str) -> str:
    return (
        "<!doctype html>\n"
        '<html lang="en"><head><meta charset="utf-8" />'
        f"<title>{escape(title)}</title></head>"
        f"<body><h1>{escape(title)}</h1><p>{text}</p>"
        '<p><a href="/">Back to Food Diary</a></p></body></html>'
    )
