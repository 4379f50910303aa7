"""
应用主入口

HTTP（FastAPI）负责登录，Socket.IO 负责实时通道，两者挂在同一个 ASGI 应用上。
"""
from typing import Optional

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from api.routes import auth as auth_routes
from api.routes.realtime import register_realtime_handlers
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from application.services.realtime_service import RoomRelay
from application.services.token_service import TokenService
from core.config import Settings, settings as default_settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.logging_config import get_logger, configure_logging
from infrastructure.realtime.socketio_server import create_socketio_server, create_socketio_asgi_app


logger = get_logger(__name__)


def create_http_app(settings: Settings, token_service: TokenService) -> FastAPI:
    """组装 FastAPI 应用：中间件、异常处理与路由"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        if settings.jwt_secret_is_default:
            logger.warning(
                "jwt_secret_insecure",
                message="JWT_SECRET not set, using the built-in development secret",
            )
        logger.info("server_starting", host=settings.HOST, port=settings.PORT)
        logger.info("realtime_initialized", message="Socket.IO service with JWT authentication is ready")
        logger.info("login_endpoint", url=f"POST http://localhost:{settings.PORT}/api/login")
        yield
        logger.info("application_shutdown", message="Application shutdown")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        description="基于 Socket.IO 的实时消息中继",
    )
    app.state.token_service = token_service

    # 添加中间件（注意顺序：从下往上执行）
    app.add_middleware(
        LoggingMiddleware,
        log_body=settings.LOG_REQUEST_BODY_ENABLE_BY_DEFAULT and settings.DEBUG,
        max_body_bytes=settings.LOG_REQUEST_BODY_MAX_BYTES,
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_routes.router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """健康检查端点"""
        return success_response(status="healthy")

    return app


def create_app(settings: Optional[Settings] = None) -> socketio.ASGIApp:
    """
    创建完整的 ASGI 应用

    Args:
        settings: 配置；缺省时使用环境变量/.env 加载的全局配置

    Returns:
        socketio.ASGIApp: 包装了 FastAPI 的 Socket.IO 应用，
        `.other_asgi_app` 为 HTTP 应用，`.engineio_server` 为 Socket.IO 服务器
    """
    settings = settings or default_settings
    token_service = TokenService(settings)

    sio = create_socketio_server(settings)
    relay = RoomRelay(transport=sio)
    register_realtime_handlers(sio, relay, token_service)

    http_app = create_http_app(settings, token_service)
    return create_socketio_asgi_app(sio, http_app, settings)


# 初始化日志：在入口处显式配置，避免模块导入时的副作用
configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        log_level="debug" if default_settings.DEBUG else "info"
    )
