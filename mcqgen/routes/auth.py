# mcqgen/routes/auth.py
from fastapi import APIRouter, Depends, Request, Response

from mcqgen.core.settings import settings
from mcqgen.schemas.auth import LoginRequest, LoginResponse
from mcqgen.services.auth_service import extract_token, get_auth_service, get_current_user

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, response: Response):
    auth_service = get_auth_service()
    token, user = auth_service.login(body.password)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.REDIS_TTL,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return {
        "message": "Login successful",
        "token": token,
        "user": user,
    }


@router.post("/logout")
def logout(request: Request, response: Response):
    token = extract_token(request)
    if token:
        get_auth_service().delete_session(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logout successful"}


@router.get("/user")
def current_user(user=Depends(get_current_user)):
    return user
