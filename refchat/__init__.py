"""RefChat 顶层包。

该包提供一个演示用聊天应用：服务端按轮转策略返回预置回答，
把会话持久化到单个 JSON 文件；客户端组件负责乐观发送与会话列表管理。
"""

from refchat.api.service import ChatService, generate_title

__all__ = ["ChatService", "generate_title"]
