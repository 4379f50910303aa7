"""
数据传输对象（DTO）- 应用层与表现层之间的数据传输
"""
from pydantic import BaseModel, Field
from typing import Optional


class LoginDTO(BaseModel):
    """登录DTO；字段缺失或为空由服务层统一拒绝"""
    username: Optional[str] = Field(None, description="用户名")
    password: Optional[str] = Field(None, description="密码")


class LoginUserDTO(BaseModel):
    """登录成功时回显的用户信息"""
    username: str
    id: int


class LoginResponseDTO(BaseModel):
    """登录响应DTO"""
    success: bool = True
    token: str
    user: LoginUserDTO
