import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripcommit.logging_config import configure_logging
from tripcommit.models.base import Base  # noqa: F401
from tripcommit.models.participant import TripParticipant  # noqa: F401 (테이블 메타데이터 등록용)
from tripcommit.models.trip import Trip  # noqa: F401
from tripcommit.models.user import User  # noqa: F401
from tripcommit.routers.trips import router as trips_router

logger = logging.getLogger("tripcommit.main")

# 기동 시 alembic upgrade head 자동 적용 여부 (테스트에서는 0)
AUTO_MIGRATE = os.getenv("AUTO_MIGRATE", "1") == "1"


def _run_alembic_upgrade() -> None:
    """앱 기동 시 DB 마이그레이션 자동 적용 (trips, trip_participants 테이블 등)."""
    from alembic import command
    from alembic.config import Config

    root = Path(__file__).resolve().parent.parent
    cfg = Config(str(root / "alembic.ini"))
    command.upgrade(cfg, "head")


app = FastAPI(
    title="TripCommit API",
    description="여행 참가자의 참가 확정(조건부 확정 포함) 현황을 보여주고 조언하는 백엔드 API",
    version="0.1.0",
)


@app.on_event("startup")
def _startup() -> None:
    """로깅 설정 + Alembic upgrade head 실행."""
    configure_logging()
    if not AUTO_MIGRATE:
        return
    try:
        _run_alembic_upgrade()
    except Exception:
        # DB 미기동 등 실패 시에도 앱은 기동 (예: 로컬에서 DB 없이 실행 시)
        logger.warning("alembic upgrade failed on startup", exc_info=True)


app.include_router(trips_router)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: 운영 시 프론트엔드 도메인으로 제한
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    return {"status": "ok"}


@app.get("/", tags=["Root"])
async def root() -> dict:
    return {
        "message": "TripCommit API",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tripcommit.main:app", host="0.0.0.0", port=8000, reload=True)
