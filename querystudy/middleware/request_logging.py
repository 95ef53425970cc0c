"""요청 로깅 미들웨어 - 검색 요청/응답을 Axiom에 구조화 로그로 전송.

Request logging middleware.
Ships one structured event per request to Axiom: method, path, query
params (the search condition), request body, status code, duration and
error detail. Sensitive keys are masked. Without Axiom credentials the
middleware is a pass-through.
"""

import json
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from querystudy.config import settings

_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 - Paths excluded from logging
_SKIP_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})

_MAX_DEPTH = 5
_MAX_ITEMS = 20
_MAX_ERROR_LEN = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드를 재귀적으로 마스킹합니다."""
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:_MAX_ITEMS]]
    return data


def _error_detail(body: bytes) -> str:
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_ERROR_LEN]
    detail = payload.get("detail", payload) if isinstance(payload, dict) else payload
    if not isinstance(detail, str):
        detail = json.dumps(detail, ensure_ascii=False, default=str)
    return detail[:_MAX_ERROR_LEN]


def build_event(
    request: Request,
    status_code: int,
    duration_ms: float,
    request_body: Any = None,
    error: str | None = None,
) -> dict[str, Any]:
    """Axiom 로그 이벤트를 구성합니다."""
    event: dict[str, Any] = {
        "app": settings.APP_NAME,
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "duration_ms": duration_ms,
    }
    if request.query_params:
        event["query_params"] = mask_sensitive(dict(request.query_params))
    if request.path_params:
        event["path_params"] = dict(request.path_params)
    if request_body is not None:
        event["request_body"] = request_body
    if error:
        event["error"] = error
    return event


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Args:
        app: 감쌀 ASGI 앱 (Wrapped ASGI app)
        client: Axiom 클라이언트. 생략하면 설정으로 생성
                (Axiom client; built from settings when omitted)
        dataset: 대상 데이터셋 (Target dataset, defaults to settings)
    """

    def __init__(
        self,
        app: ASGIApp,
        client: AxiomClient | None = None,
        dataset: str | None = None,
    ) -> None:
        super().__init__(app)
        self._dataset: str = dataset if dataset is not None else settings.AXIOM_DATASET
        self._client: AxiomClient | None = client

        if self._client is None and settings.AXIOM_API_TOKEN and self._dataset:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self._client is None or request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time: float = time.perf_counter()

        request_body: Any = None
        if request.method in ("POST", "PUT", "PATCH"):
            body_bytes: bytes = await request.body()
            if body_bytes:
                try:
                    request_body = mask_sensitive(json.loads(body_bytes))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    request_body = "(non-json body)"

        error: str | None = None
        status_code: int = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code

            # 에러 응답은 body를 읽어 사유를 남긴 뒤 다시 감싸서 반환
            # Error bodies are consumed for the detail, then re-wrapped
            if status_code >= 400:
                body = b""
                async for chunk in response.body_iterator:  # type: ignore[attr-defined]
                    body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error = _error_detail(body)
                response = Response(
                    content=body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms: float = round((time.perf_counter() - start_time) * 1000, 2)
            event = build_event(request, status_code, duration_ms, request_body, error)
            try:
                # 동기 HTTP 호출은 스레드풀에서 실행 - ingest runs off the event loop
                await run_in_threadpool(self._client.ingest_events, self._dataset, [event])
            except Exception:
                pass  # 로그 전송 실패는 요청 처리에 영향 없음 - log shipping never breaks a request

        return response
