"""사전 캐시 주기적 재구성 스케줄러"""

from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.core.logging import logger
from src.services.impl.dictionary_service import RecallDictionaryService


class DictionaryRefreshScheduler:
    """사전 캐시 재구성 스케줄러

    수집 배치가 refresh 엔드포인트를 호출하지 못하는 환경을 위한 보조 수단입니다.
    """

    JOB_ID = "dictionary_refresh"

    def __init__(self, dictionary_service: RecallDictionaryService):
        self.dictionary_service = dictionary_service

    def run_refresh(self) -> dict:
        """재구성 실행 (실패해도 이전 스냅샷 유지)"""
        logger.info("[Scheduler] Starting dictionary refresh...")
        ok = self.dictionary_service.refresh_safely()
        stats = self.dictionary_service.stats()
        if ok:
            logger.info(f"[Scheduler] Dictionary refreshed: {stats}")
        return {"status": "success" if ok else "error", "stats": stats}

    def schedule_with_apscheduler(self, interval_minutes: int) -> Optional[BackgroundScheduler]:
        """APScheduler를 사용한 스케줄링 설정 (interval_minutes <= 0이면 None)"""
        if interval_minutes <= 0:
            logger.info("[Scheduler] Periodic dictionary refresh disabled")
            return None

        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.run_refresh,
            trigger=IntervalTrigger(minutes=interval_minutes),
            id=self.JOB_ID,
            name="Recall Dictionary Refresh",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        logger.info(f"[Scheduler] Dictionary refresh job scheduled every {interval_minutes} minutes")
        return scheduler
