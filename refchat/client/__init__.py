"""客户端组件：HTTP 客户端、会话缓存、会话列表、表格渲染与回答反馈。"""

from refchat.client.api_client import ChatApiClient
from refchat.client.session_cache import PendingSend, SendState, SessionCache
from refchat.client.session_list import SessionListController

__all__ = ["ChatApiClient", "PendingSend", "SendState", "SessionCache", "SessionListController"]
