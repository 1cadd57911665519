"""领域层模型与协议。

包含：
- models: Session / Message / Table / CannedAnswer 等数据结构。
- session_store: 会话存储的 SessionStore 抽象。
- exceptions: 业务异常类型定义。
"""
