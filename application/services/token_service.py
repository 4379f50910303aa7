"""
令牌服务 - 签发与校验 JWT

登录是桩实现：任意非空用户名/密码都会签发令牌，不查询任何用户库。
令牌无状态、不落库，有效期在签发时确定，不提供刷新。
"""
from typing import Optional
from datetime import datetime, timedelta, timezone
import jwt

from domain.user.entity import UserIdentity
from domain.common.exceptions import InvalidCredentialsException, InvalidTokenException
from application.dto import LoginResponseDTO, LoginUserDTO
from core.config import Settings
from core.logging_config import get_logger


logger = get_logger(__name__)


class TokenService:
    """令牌服务"""

    def __init__(self, settings: Settings):
        self._secret = settings.JWT_SECRET
        self._algorithm = settings.JWT_ALGORITHM
        self._ttl = timedelta(hours=settings.TOKEN_EXPIRE_HOURS)

    def login(self, username: Optional[str], password: Optional[str]) -> LoginResponseDTO:
        """
        校验用户名/密码并签发访问令牌

        Args:
            username: 用户名
            password: 密码（只要求非空）

        Returns:
            LoginResponseDTO: 令牌与回显的用户信息

        Raises:
            InvalidCredentialsException: 任一字段缺失或为空
        """
        if not username or not password:
            logger.info("login_rejected", has_username=bool(username), has_password=bool(password))
            raise InvalidCredentialsException()

        identity = UserIdentity.for_username(username)
        token = self.create_access_token(identity)
        logger.info("login_succeeded", username=identity.username, user_id=identity.id)
        return LoginResponseDTO(
            token=token,
            user=LoginUserDTO(username=identity.username, id=identity.id),
        )

    def create_access_token(self, identity: UserIdentity, *, now: Optional[datetime] = None) -> str:
        """创建访问令牌"""
        issued_at = now or datetime.now(timezone.utc)
        to_encode = {
            **identity.to_claims(),
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> UserIdentity:
        """Verify an access JWT and return the embedded identity.

        Bad signature, malformed payload and expiry all collapse into
        InvalidTokenException; callers only distinguish present/absent.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise InvalidTokenException("expired") from None
        except jwt.InvalidTokenError as e:
            logger.debug("invalid_access_token", error=str(e))
            raise InvalidTokenException("invalid") from e

        try:
            return UserIdentity.from_claims(payload)
        except KeyError as e:
            raise InvalidTokenException(f"missing claim {e}") from e
