"""
API依赖项 - 从应用状态获取服务实例
"""
from fastapi import Request

from application.services.token_service import TokenService


def get_token_service(request: Request) -> TokenService:
    svc = getattr(request.app.state, "token_service", None)
    if svc is None:
        raise RuntimeError("Token service not initialized. Ensure create_app sets app.state.token_service.")
    return svc
