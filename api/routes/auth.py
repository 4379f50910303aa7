"""
登录API路由 - FastAPI表现层
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends

from application.dto import LoginDTO, LoginResponseDTO
from application.services.token_service import TokenService
from api.dependencies import get_token_service

router = APIRouter(tags=["认证"])


@router.post("/login", summary="用户登录", response_model=LoginResponseDTO)
def login(
    login_data: Optional[LoginDTO] = Body(default=None),
    service: TokenService = Depends(get_token_service),
):
    """
    用户登录获取访问令牌

    - **username**: 用户名（非空即可）
    - **password**: 密码（非空即可，不做校验）

    令牌有效期 24 小时，签发后不可刷新。
    """
    data = login_data or LoginDTO()
    return service.login(data.username, data.password)
