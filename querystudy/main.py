"""FastAPI 애플리케이션 엔트리포인트 - 미들웨어 및 라우터 등록.

FastAPI application entry point - Middleware and router registration.
When SEED_SAMPLE_DATA is enabled the sample teams and members are
created at startup.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from querystudy.config import settings
from querystudy.middleware.request_logging import RequestLoggingMiddleware


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """시작 시 샘플 데이터를 시드합니다 (설정된 경우)."""
    if settings.SEED_SAMPLE_DATA:
        from querystudy.seed import seed

        await seed()
    yield


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 요청 로깅 미들웨어 - Axiom request/response logging
app.add_middleware(RequestLoggingMiddleware)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# 라우터 등록 - Router registration
from querystudy.api import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
