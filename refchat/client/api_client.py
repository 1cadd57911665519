"""聊天服务 HTTP 客户端。

本模块负责：

1. 把会话列表、新建、读取、提问、删除五个操作转换为 REST 调用。
2. 处理网络错误与非 2xx 响应，统一包装为 domain.exceptions 中的异常。
3. 把响应 JSON 解析为 Session / SessionSummary 等模型。
"""

from typing import Any, Dict, List, Optional

import httpx

from refchat.domain.exceptions import ApiError, NetworkError, NotFoundError, ValidationError
from refchat.domain.models import Session, SessionSummary
from refchat.infrastructure.logging.logger import logger


class ChatApiClient:
    """REST 接口客户端。

    - base_url: 服务端地址，例如 http://localhost:5000。
    - timeout: 单次请求超时时间（秒）。
    """

    def __init__(self, settings, base_url: Optional[str] = None):
        self._settings = settings
        self._base_url = (base_url or settings.api_base_url).rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base_url

    def list_sessions(self) -> List[SessionSummary]:
        data = self._request("GET", "/api/sessions")
        return [SessionSummary.from_dict(item) for item in data or []]

    def create_chat(self) -> Dict[str, Any]:
        return self._request("GET", "/api/new-chat")

    def get_session(self, session_id: str) -> Session:
        return Session.from_dict(self._request("GET", f"/api/session/{session_id}"))

    def ask(self, session_id: str, question: str) -> Dict[str, Any]:
        """发送问题，返回服务端给出的助手消息原始字典。"""

        return self._request("POST", f"/api/chat/{session_id}", json={"question": question})

    def delete_session(self, session_id: str) -> Dict[str, Any]:
        data = self._request("DELETE", f"/api/session/{session_id}")
        # 204 或非 JSON 响应时返回默认提示
        return data if isinstance(data, dict) else {"message": "Session deleted successfully"}

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.request(
                    method,
                    f"{self._base_url}{path}",
                    json=json,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed", extra={"extra": {"error": str(e)}})
            raise NetworkError(code="NETWORK_ERROR", message=str(e))
        if resp.status_code >= 400:
            raise self._error_for(resp)
        if resp.status_code == 204 or not resp.content:
            return None
        if "application/json" not in resp.headers.get("content-type", ""):
            raise ApiError(
                code="INVALID_RESPONSE",
                message=f"expected JSON from {method} {path}",
                http_status=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(code="INVALID_RESPONSE", message=str(e), http_status=resp.status_code)

    @staticmethod
    def _error_for(resp) -> Exception:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.pop("error", None) or f"HTTP {resp.status_code}"
        body = {k: v for k, v in body.items() if k not in {"code", "message", "http_status"}}
        if resp.status_code == 404:
            return NotFoundError(message=message, **body)
        if resp.status_code == 400:
            return ValidationError(code="INVALID_INPUT", message=message, **body)
        return ApiError(code="API_ERROR", message=message, http_status=resp.status_code)
