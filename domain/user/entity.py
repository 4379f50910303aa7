"""
用户身份实体 - 令牌中携带的用户信息
"""
from dataclasses import dataclass, asdict
from typing import Any


# 不存在用户库，所有登录身份共用同一个 id
STUB_USER_ID = 1
EMAIL_DOMAIN = "example.com"


@dataclass(frozen=True)
class UserIdentity:
    """用户身份 - 连接生命周期内保持不变"""

    id: int
    username: str
    email: str

    @classmethod
    def for_username(cls, username: str) -> "UserIdentity":
        """业务规则：由用户名派生身份，id 固定，邮箱按用户名拼接"""
        return cls(id=STUB_USER_ID, username=username, email=f"{username}@{EMAIL_DOMAIN}")

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "UserIdentity":
        """从已验签的令牌载荷还原身份；缺字段时抛出 KeyError"""
        return cls(id=claims["id"], username=claims["username"], email=claims["email"])

    def to_claims(self) -> dict[str, Any]:
        return asdict(self)
