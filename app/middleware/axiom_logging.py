"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Captures request/response data and sends structured logs to Axiom.
Logs: API endpoint, method, data (body/params), status code, error reason.
Sensitive fields (password, token, secret) are masked, inline image payloads
are replaced by their size, and multipart uploads are never buffered.
"""

import json
import logging
import re
import time
from typing import Any
from urllib.parse import parse_qsl

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request/response bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential|code|state)",
    re.IGNORECASE,
)

# 이미지 데이터 필드 — Inline image payloads logged by size only
_IMAGE_KEYS = re.compile(r"(image_?base64|photo|images?)$", re.IGNORECASE)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_VALUE_LEN = 500


def _sanitize(data: Any, depth: int = 0) -> Any:
    """민감 필드 마스킹 및 긴 값 절단 — Mask secrets and truncate long values."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        cleaned: dict[str, Any] = {}
        for k, v in data.items():
            if _SENSITIVE_KEYS.search(k):
                cleaned[k] = "***"
            elif _IMAGE_KEYS.search(k) and isinstance(v, str):
                cleaned[k] = f"({len(v)} chars)"
            else:
                cleaned[k] = _sanitize(v, depth + 1)
        return cleaned
    if isinstance(data, list):
        return [_sanitize(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > _MAX_VALUE_LEN:
        return data[:_MAX_VALUE_LEN] + "...(truncated)"
    return data


async def _read_body(request: Request) -> Any:
    """요청 본문 요약 — JSON and urlencoded bodies are parsed, multipart is skipped."""
    content_type: str = request.headers.get("content-type", "")
    if content_type.startswith("multipart/"):
        return "(multipart upload)"

    body_bytes = await request.body()
    if not body_bytes:
        return None
    try:
        if content_type.startswith("application/x-www-form-urlencoded"):
            return _sanitize(dict(parse_qsl(body_bytes.decode("utf-8"))))
        return _sanitize(json.loads(body_bytes))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs all API requests and responses to Axiom.
    Captures: method, path, query params, request body, status code, error detail.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path

        # 제외 경로 및 미디어 스킵 — Skip excluded paths and media downloads
        if path in _SKIP_PATHS or path.startswith(settings.UPLOADS_URL_PREFIX + "/"):
            return await call_next(request)

        # Axiom 미설정시 패스스루 — Pass through if Axiom not configured
        if not self._client:
            return await call_next(request)

        start_time = time.time()
        method = request.method
        query_params = dict(request.query_params) if request.query_params else None

        request_body: Any = None
        if method in ("POST", "PUT", "PATCH"):
            request_body = await _read_body(request)

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error detail from error responses
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

                try:
                    error_data = json.loads(resp_body)
                    error_detail = str(error_data.get("detail", error_data))[:_MAX_VALUE_LEN]
                except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
                    error_detail = resp_body.decode("utf-8", errors="replace")[:_MAX_VALUE_LEN]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            log_event: dict[str, Any] = {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
            if query_params:
                log_event["query_params"] = _sanitize(query_params)
            if request_body is not None:
                log_event["request_body"] = request_body
            if error_detail:
                log_event["error"] = error_detail

            try:
                self._client.ingest_events(self._dataset, [log_event])
            except Exception:
                # 로깅 실패는 요청에 영향 없음 — Never break the request on log failure
                logger.warning("Axiom ingest failed for %s %s", method, path, exc_info=True)

        return response
