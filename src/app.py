"""FastAPI 앱 팩토리"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.database import init_db
from src.core.exceptions import RecallMatcherException
from src.core.logging import logger
from src.api import health_router, recall_router, get_dictionary_service
from src.clients.http_client import shutdown_shared_http_client
from src.scheduler import DictionaryRefreshScheduler


async def _warm_up_dictionary():
    """최초 사전 구성 후 주기 갱신 스케줄러를 돌려준다 (비활성이면 None)"""
    dictionary_service = get_dictionary_service()
    # 실패해도 빈 사전으로 기동한다
    await asyncio.to_thread(dictionary_service.refresh_safely)

    scheduler = DictionaryRefreshScheduler(dictionary_service).schedule_with_apscheduler(
        settings.dictionary_refresh_interval_minutes
    )
    if scheduler is not None:
        scheduler.start()
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    scheduler = await _warm_up_dictionary()
    logger.info(f"[App] ready (env={settings.environment}, ai={'on' if settings.ai_enabled else 'off'})")
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        await shutdown_shared_http_client()
        logger.info("[App] stopped")


async def _domain_error_handler(request: Request, exc: RecallMatcherException) -> JSONResponse:
    # 라우트에서 잡지 못한 도메인 오류는 503으로 통일
    logger.error(f"[App] unhandled {exc.error_code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=503,
        content={"status": "error", "error_code": exc.error_code, "message": exc.message},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RecallMatcherException, _domain_error_handler)

    for router in (health_router, recall_router):
        app.include_router(router)

    return app


app = create_app()
