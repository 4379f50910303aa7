"""
统一响应格式定义

REST 接口沿用 `{success, ...}` 的扁平结构，错误响应附带业务码与 request_id。
"""
from typing import Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """错误响应模型"""
    success: bool = False
    message: str
    code: int
    error_type: str = "BusinessError"
    details: Optional[dict] = None
    request_id: Optional[str] = None


def success_response(**fields: Any) -> dict:
    """
    创建成功响应

    Args:
        fields: 合并进响应体的字段

    Returns:
        dict: `{"success": True, **fields}`
    """
    return {"success": True, **fields}


def error_response(
    code: int,
    message: str,
    error_type: str = "BusinessError",
    details: Optional[dict] = None,
    request_id: Optional[str] = None
) -> dict:
    """
    创建错误响应

    Args:
        code: 业务状态码
        message: 错误消息
        error_type: 错误类型
        details: 错误详情
        request_id: 请求ID

    Returns:
        dict: 去掉空字段后的响应体
    """
    return ErrorResponse(
        message=message,
        code=code,
        error_type=error_type,
        details=details,
        request_id=request_id,
    ).model_dump(exclude_none=True)
