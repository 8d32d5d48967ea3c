from datetime import timedelta

import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from authx import AuthX, AuthXConfig, TokenPayload
from core.config import settings
from core.database import get_db
from core.exceptions import AuthError
from schemas.auth import LoginIn, RegisterIn, TokenOut, UserOut
from services.auth_services import AuthService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

_cookie_samesite = settings.JWT_COOKIE_SAMESITE.lower() if settings.JWT_COOKIE_SAMESITE else None
_cookie_domain = settings.JWT_COOKIE_DOMAIN or None

config = AuthXConfig(
    JWT_SECRET_KEY=settings.SECRET_KEY,
    JWT_ALGORITHM=settings.JWT_ALG,
    JWT_ACCESS_TOKEN_EXPIRES=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    JWT_TOKEN_LOCATION=["headers", "cookies"],
    JWT_ACCESS_COOKIE_NAME=settings.JWT_ACCESS_COOKIE_NAME,
    JWT_COOKIE_SAMESITE=_cookie_samesite or "lax",
    JWT_COOKIE_SECURE=settings.JWT_COOKIE_SECURE,
    JWT_COOKIE_DOMAIN=_cookie_domain,
    JWT_COOKIE_CSRF_PROTECT=False,
)

security = AuthX(config=config)


def _decode_token(token: str) -> TokenPayload:
    return TokenPayload.decode(
        token=token,
        key=security.config.public_key,
        algorithms=[security.config.JWT_ALGORITHM],
    )


def _token_from_request(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.JWT_ACCESS_COOKIE_NAME) or None


def get_owner_id(request: Request) -> int | None:
    """Resolve the caller to an owner id, or ``None`` when anonymous.

    Invalid or expired tokens count as anonymous; services decide whether
    that is an error.
    """
    token = _token_from_request(request)
    if token is None:
        return None
    try:
        payload = _decode_token(token)
        if payload.type not in (None, "access"):
            return None
        return int(payload.sub)
    except Exception as exc:
        logger.debug("access_token_rejected", error=str(exc))
        return None


@router.post("/register", response_model=UserOut, status_code=201)
async def post_reg(data: RegisterIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    user = svc.register(email=data.email, username=data.username, password=data.password)
    logger.info("user_registered", user_id=user.id)
    return UserOut(id=user.id, email=user.email, username=user.username)


@router.post("/login", response_model=TokenOut)
async def post_login(response: Response, data: LoginIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    user = svc.login(email=data.email, password=data.password)

    access_token = security.create_access_token(uid=str(user.id))
    security.set_access_cookies(access_token, response)
    return TokenOut(access_token=access_token)


@router.post("/logout")
async def logout(response: Response):
    security.unset_cookies(response)
    return {"ok": True}


@router.get("/me")
async def me(owner_id: int | None = Depends(get_owner_id)):
    if owner_id is None:
        raise AuthError()
    return {"user_id": owner_id}
