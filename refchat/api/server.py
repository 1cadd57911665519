from __future__ import annotations

from typing import Any, Dict

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from refchat.api.service import ChatService, get_default_service
from refchat.config.settings import settings
from refchat.domain.exceptions import BusinessError
from refchat.infrastructure.logging.logger import logger


app = FastAPI(title="RefChat Demo Server", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


class AskRequest(BaseModel):
    # 类型在 service 层校验，这里不做约束，非字符串统一返回 400
    question: Any = Field(default=None, description="User's question")


@app.exception_handler(BusinessError)
async def business_error_handler(request: Request, exc: BusinessError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content={"error": exc.message, **exc.extra})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request body", extra={"extra": {"path": request.url.path}})
    return JSONResponse(status_code=400, content={"error": "Question is required"})


def _internal_error(message: str, exc: Exception) -> JSONResponse:
    logger.exception(message, extra={"extra": {"error": str(exc)}})
    return JSONResponse(status_code=500, content={"error": message})


@app.get("/api/sessions")
def list_sessions(service: ChatService = Depends(get_default_service)) -> Any:
    try:
        return service.list_sessions()
    except BusinessError:
        raise
    except Exception as e:
        return _internal_error("Failed to fetch sessions", e)


@app.get("/api/new-chat")
def new_chat(service: ChatService = Depends(get_default_service)) -> Any:
    try:
        return service.new_chat()
    except BusinessError:
        raise
    except Exception as e:
        return _internal_error("Failed to create new chat", e)


@app.get("/api/session/{session_id}")
def get_session(session_id: str, service: ChatService = Depends(get_default_service)) -> Any:
    try:
        return service.get_session(session_id)
    except BusinessError:
        raise
    except Exception as e:
        return _internal_error("Failed to fetch session", e)


@app.post("/api/chat/{session_id}")
def chat(session_id: str, req: AskRequest, service: ChatService = Depends(get_default_service)) -> Any:
    logger.info(
        "Incoming chat",
        extra={"extra": {"session_id": session_id, "question_len": len(req.question) if isinstance(req.question, str) else None}},
    )
    try:
        return service.ask(session_id, req.question)
    except BusinessError:
        raise
    except Exception as e:
        return _internal_error("Failed to process chat message", e)


@app.delete("/api/session/{session_id}")
def delete_session(session_id: str, service: ChatService = Depends(get_default_service)) -> Any:
    logger.info("Delete request", extra={"extra": {"session_id": session_id}})
    try:
        return service.delete_session(session_id)
    except BusinessError:
        raise
    except Exception as e:
        return _internal_error("Failed to delete session", e)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


def main() -> None:
    logger.info(f"Server running on http://localhost:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
