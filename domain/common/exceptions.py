"""领域层业务异常定义，供领域与应用层使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        super().__init__(self.message)


class InvalidCredentialsException(BusinessException):
    """登录缺少用户名或密码"""

    def __init__(self):
        super().__init__(
            code=BusinessCode.INVALID_CREDENTIALS,
            message="Username and password required",
            error_type="InvalidCredentials",
        )


class MissingTokenException(BusinessException):
    """握手时未携带令牌"""

    def __init__(self):
        super().__init__(
            code=BusinessCode.TOKEN_MISSING,
            message="Authentication error: No token provided",
            error_type="MissingToken",
        )


class InvalidTokenException(BusinessException):
    """令牌签名错误、格式错误或已过期"""

    def __init__(self, reason: Optional[str] = None):
        details = {"reason": reason} if reason else None
        super().__init__(
            code=BusinessCode.TOKEN_INVALID,
            message="Authentication error: Invalid token",
            error_type="InvalidToken",
            details=details,
        )
