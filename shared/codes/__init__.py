"""
Shared business codes used across layers (Domain/Core/API).

Single source of truth for the codes carried by BusinessException and
rendered into error responses.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Unified business status codes (single source of truth)."""

    # Parameter errors (1xxxx)
    PARAM_VALIDATION_ERROR = 10003

    # Auth errors (2xxxx)
    INVALID_CREDENTIALS = 20003
    TOKEN_INVALID = 20004
    TOKEN_MISSING = 20007
    NOT_FOUND = 20006  # Generic resource not found

    # Permission errors (3xxxx)
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # System errors (4xxxx)
    SYSTEM_ERROR = 40000
    SERVICE_UNAVAILABLE = 40003


__all__ = ["BusinessCode"]
