"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层或客户端做统一捕获与用户提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "SESSION_NOT_FOUND"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时使用的状态码，默认 400。
        extra: 其他补充字段（例如 requestedId、availableCount 等），
            会原样合并进 HTTP 错误响应体。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NotFoundError(BusinessError):
    """请求的会话不存在。"""

    def __init__(self, code: str = "SESSION_NOT_FOUND", message: str = "Session not found", http_status: int = 404, **extra):
        super().__init__(code, message, http_status, **extra)


class ValidationError(BusinessError):
    """参数、配置或状态校验失败。"""


class StoreIOError(BusinessError):
    """会话文件读写失败。由存储层内部消化，不会传到 HTTP 层。"""

    def __init__(self, code: str, message: str, http_status: int = 500, **extra):
        super().__init__(code, message, http_status, **extra)


class NetworkError(BusinessError):
    """客户端网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """服务端返回未单独映射的非 2xx 状态时抛出。"""
