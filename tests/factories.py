# 엔진 테스트용 스냅샷 헬퍼

from datetime import datetime, timezone

from tripcommit.schemas.participant import ParticipantRecord


def day(n: int, hour: int = 0) -> datetime:
    """2026-11-n (UTC)."""
    return datetime(2026, 11, n, hour, tzinfo=timezone.utc)


def record(user_id: int, status: str = "pending", **kwargs) -> ParticipantRecord:
    return ParticipantRecord(user_id=user_id, trip_id=1, confirmation_status=status, **kwargs)


def conditional(user_id: int, conditional_type: str, date=None, waits_on=None, **kwargs) -> ParticipantRecord:
    return record(
        user_id,
        "conditional",
        conditional_type=conditional_type,
        conditional_date=date,
        conditional_user_ids=waits_on or [],
        **kwargs,
    )
