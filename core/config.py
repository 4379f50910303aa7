"""
配置文件 - 项目配置管理
"""
import json
from typing import Annotated

from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator, model_validator


# 与原服务保持一致的开发用默认密钥，仅供本地调试
INSECURE_DEFAULT_SECRET = "test-secret-key"


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(default="Realtime Relay", validation_alias=AliasChoices("PROJECT_NAME", "APP_NAME"))
    VERSION: str = Field(default="1.0.0", validation_alias=AliasChoices("VERSION", "APP_VERSION"))
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # 监听地址
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # 安全配置
    JWT_SECRET: str = Field(
        default=INSECURE_DEFAULT_SECRET,
        validation_alias=AliasChoices("JWT_SECRET", "SECRET_KEY"),
        description="JWT签名密钥，生产环境必须设置",
    )
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_HOURS: int = 24

    # CORS配置（REST 与 Socket.IO 共用）
    CORS_ORIGINS: Annotated[list[str], NoDecode] = Field(default=["*"])

    # Socket.IO 配置；心跳/超时交由 Engine.IO 处理
    SIO_PATH: str = "socket.io"
    SIO_PING_INTERVAL: float = 25.0
    SIO_PING_TIMEOUT: float = 20.0

    # 日志/请求体记录配置
    LOG_REQUEST_BODY_ENABLE_BY_DEFAULT: bool = True
    LOG_REQUEST_BODY_MAX_BYTES: int = 2048

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def jwt_secret_is_default(self) -> bool:
        return self.JWT_SECRET == INSECURE_DEFAULT_SECRET

    @model_validator(mode="after")
    def _validate_secret_key(self):
        # 生产环境禁止使用默认密钥
        if self.ENVIRONMENT.lower() == "production" and self.jwt_secret_is_default:
            raise ValueError(
                "JWT_SECRET 未配置。生产环境请在环境变量或 .env 中设置 JWT_SECRET（或 SECRET_KEY）"
            )
        return self

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """允许 JSON 字符串或逗号分隔字符串两种格式。"""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                try:
                    arr = json.loads(s)
                    if isinstance(arr, list):
                        return arr
                except ValueError:
                    pass
            if "," in s:
                return [item.strip() for item in s.split(",") if item.strip()]
            return [s]
        return v


settings = Settings()
