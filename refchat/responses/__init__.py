"""回答选择层。

该包下的模块负责：
- 定义回答来源抽象接口 (base)。
- 维护预置回答语料与种子会话 (corpus)。
- 提供具体的选择策略 (如 round_robin)。
"""

from typing import Optional

from refchat.config.settings import settings
from refchat.domain.exceptions import ValidationError
from refchat.responses.base import ResponseSource
from refchat.responses.round_robin import RoundRobinResponseSource


def create_response_source(name: Optional[str] = None) -> ResponseSource:
    """根据名称创建回答来源实例，默认取配置中的 response_source。"""

    source_name = (name or getattr(settings, "response_source", "round_robin")).lower()
    if source_name == "round_robin":
        return RoundRobinResponseSource()
    raise ValidationError(code="UNKNOWN_SOURCE", message=f"unknown response source: {source_name}")
