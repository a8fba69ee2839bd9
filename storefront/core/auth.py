"""
Аутентификация и права доступа к админке.

Пароли хешируются bcrypt, доступ выдается JWT (HS256) с ID пользователя
в `sub`. Правила доступа собраны здесь, чтобы вход и каждый защищенный
запрос проверяли пользователя одинаково:

- неизвестный логин, неверный пароль или токен -> 401
- отключенный аккаунт -> 400
- роль не admin -> 403
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.database import get_db
from storefront.db.models.base import utc_now
from storefront.db.models.user import USER_ROLES, User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"

security = HTTPBearer()


def credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def ensure_admin(user: User) -> User:
    """
    Проверить, что пользователь может работать в админке.

    Raises:
        HTTPException: 400 для отключенного аккаунта, 403 без роли admin
    """
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User account is disabled"
        )
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required.",
        )
    return user


def validate_role(role: str) -> str:
    """Роль должна быть одной из USER_ROLES, иначе 400."""
    if role not in USER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid role. Allowed: {', '.join(USER_ROLES)}",
        )
    return role


class AuthService:
    """Сервис для работы с аутентификацией."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def token_lifetime() -> timedelta:
        return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    @classmethod
    def create_access_token(
        cls, data: dict, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Подписать JWT; срок жизни по умолчанию из настроек."""
        payload = dict(data)
        payload["exp"] = datetime.now(timezone.utc) + (expires_delta or cls.token_lifetime())
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Payload токена или None для просроченного / поддельного."""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        except jwt.PyJWTError:
            return None

    @classmethod
    def authenticate(cls, db: Session, login: str, password: str) -> User:
        """
        Найти пользователя по username или email и проверить пароль.

        Raises:
            HTTPException: 401 при неверных учетных данных
        """
        user = db.scalar(
            select(User).where(or_(User.username == login, User.email == login))
        )
        if user is None or not cls.verify_password(password, user.hashed_password):
            logger.warning(f"Failed login for {login}")
            raise credentials_error("Incorrect username or password")
        return user

    @classmethod
    def login_admin(cls, db: Session, login: str, password: str) -> Tuple[User, str]:
        """
        Вход в админку: проверка пароля и прав, отметка времени входа.

        Returns:
            (пользователь, access token)
        """
        user = ensure_admin(cls.authenticate(db, login, password))

        user.last_login = utc_now()
        db.commit()

        logger.info(f"Admin {user.username} logged in")
        return user, cls.create_access_token(data={"sub": str(user.id)})


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Пользователь из bearer-токена; 401, если токен или пользователь недействителен."""
    payload = AuthService.verify_token(credentials.credentials)
    user_id = payload.get("sub") if payload else None
    if user_id is None:
        raise credentials_error()

    user = db.get(User, user_id)
    if user is None:
        raise credentials_error()
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency для всех защищенных эндпоинтов админки."""
    return ensure_admin(current_user)


auth_service = AuthService()
