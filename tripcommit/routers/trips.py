# 여행 / 참가 확정 API
import logging
import math
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from tripcommit.crud.participant_crud import (
    ParticipantError,
    add_participant,
    load_snapshot,
    to_record,
    update_commitment,
)
from tripcommit.crud.trip_crud import TripError, create_trip, get_trip, update_confirmation_settings
from tripcommit.database import get_db
from tripcommit.models.participant import ConfirmationStatus
from tripcommit.models.trip import Trip
from tripcommit.realtime.sse_pubsub import publish_participants_changed, stream_participant_events
from tripcommit.schemas.participant import (
    CommitmentUpdateBody,
    CommitmentUpdateOut,
    DependencyCandidateOut,
    ParticipantAddBody,
    ParticipantOut,
    ParticipantRecord,
)
from tripcommit.schemas.trip import (
    CapacityOut,
    ConfirmationSettingsBody,
    RosterOut,
    RosterSectionOut,
    TripCreate,
    TripResponse,
)
from tripcommit.services.capacity_advisor import (
    capacity_summary,
    capacity_warning,
    default_expanded_sections,
    fill_level,
)
from tripcommit.services.dependency_resolver import conditions_met, effective_deadline
from tripcommit.services.mutual_dependency import is_mutually_dependent, mutual_dependency_ids
from tripcommit.services.roster_ordering import DISPLAY_ORDER, group_and_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["Trips"])

CONFIRMED = ConfirmationStatus.CONFIRMED.value
CONDITIONAL = ConfirmationStatus.CONDITIONAL.value
WAITLIST = ConfirmationStatus.WAITLIST.value


def _trip_or_404(db: Session, trip_id: int) -> Trip:
    try:
        return get_trip(db, trip_id)
    except TripError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


def _participant_out(
    record: ParticipantRecord,
    snapshot: List[ParticipantRecord],
    now: datetime,
) -> ParticipantOut:
    """스냅샷 행 → 응답. conditional이면 effective_deadline / conditions_met 계산해서 붙임."""
    deadline = None
    met = None
    if record.confirmation_status == CONDITIONAL:
        deadline = effective_deadline(record, snapshot)
        met = conditions_met(record, snapshot, now=now)
    return ParticipantOut(
        user_id=record.user_id,
        role=record.role,
        display_name=record.display_name,
        confirmation_status=record.confirmation_status,
        confirmed_at=record.confirmed_at,
        confirmation_note=record.confirmation_note,
        conditional_type=record.conditional_type,
        conditional_date=record.conditional_date,
        conditional_user_ids=list(record.conditional_user_ids),
        updated_at=record.updated_at,
        effective_deadline=deadline,
        conditions_met=met,
    )


def _days_until(deadline: Optional[datetime], now: datetime) -> Optional[int]:
    """여행 확정 마감까지 남은 일수 (올림). 마감 없으면 None."""
    if deadline is None:
        return None
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    return math.ceil((deadline - now).total_seconds() / 86400)


def build_roster(trip: Trip, snapshot: List[ParticipantRecord], now: datetime) -> RosterOut:
    """전체 스냅샷 → 그룹/정렬/주석이 붙은 명단 + 정원 요약."""
    groups = group_and_order(snapshot)
    confirmed_count = len(groups[CONFIRMED])
    conditional_count = len(groups[CONDITIONAL])
    waitlist_count = len(groups[WAITLIST])
    summary = capacity_summary(confirmed_count, trip.capacity_limit, conditional_count, waitlist_count)

    sections = [
        RosterSectionOut(
            status=status,
            count=len(groups[status]),
            participants=[_participant_out(p, snapshot, now) for p in groups[status]],
        )
        for status in DISPLAY_ORDER
    ]
    return RosterOut(
        trip_id=trip.id,
        confirmation_enabled=bool(trip.confirmation_enabled),
        days_until_deadline=_days_until(trip.confirmation_deadline, now),
        capacity=CapacityOut(
            capacity_limit=trip.capacity_limit,
            confirmed_count=confirmed_count,
            conditional_count=conditional_count,
            waitlist_count=waitlist_count,
            is_full=summary.is_full,
            spots_remaining=summary.spots_remaining,
            pipeline_total=summary.pipeline_total,
            fill_level=fill_level(confirmed_count, trip.capacity_limit),
        ),
        expanded_sections=default_expanded_sections(summary),
        sections=sections,
        counts={status: len(members) for status, members in groups.items()},
    )


@router.post("", response_model=TripResponse)
def post_trip(body: TripCreate, db: Session = Depends(get_db)) -> TripResponse:
    """여행 생성. 확정 시스템은 꺼진 상태로 시작."""
    try:
        trip = create_trip(db, body)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("failed to create trip")
        raise HTTPException(status_code=500, detail="Failed to create trip")
    db.refresh(trip)
    return TripResponse.model_validate(trip)


@router.get("/{trip_id}", response_model=TripResponse)
def get_trip_detail(trip_id: int, db: Session = Depends(get_db)) -> TripResponse:
    """id로 여행 조회. 없으면 404."""
    return TripResponse.model_validate(_trip_or_404(db, trip_id))


@router.put("/{trip_id}/confirmation-settings", response_model=TripResponse)
def put_confirmation_settings(
    trip_id: int,
    body: ConfirmationSettingsBody,
    db: Session = Depends(get_db),
) -> TripResponse:
    """주최자의 확정 설정 저장 (사용 여부, 안내 메시지, 정원, 마감일)."""
    try:
        trip = update_confirmation_settings(db, trip_id, body)
        db.commit()
    except TripError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        db.rollback()
        logger.exception("failed to update confirmation settings", extra={"trip_id": trip_id})
        raise HTTPException(status_code=500, detail="Failed to update confirmation settings")
    db.refresh(trip)
    return TripResponse.model_validate(trip)


@router.post("/{trip_id}/participants", response_model=ParticipantOut)
async def post_participant(trip_id: int, body: ParticipantAddBody, db: Session = Depends(get_db)):
    """기존 사용자를 pending 참가자로 추가. 예외 시 rollback."""
    try:
        participant = add_participant(db, trip_id, body.user_id, body.role)
        db.commit()  # ✅ 트랜잭션 소유권: 라우터
    except ParticipantError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        db.rollback()
        logger.exception("failed to add participant", extra={"trip_id": trip_id})
        raise HTTPException(status_code=500, detail="Failed to add participant")

    db.refresh(participant)
    await publish_participants_changed(trip_id, body.user_id, participant.confirmation_status)
    record = to_record(participant)
    return _participant_out(record, [record], datetime.now(timezone.utc))


@router.get("/{trip_id}/roster", response_model=RosterOut)
def get_roster(trip_id: int, db: Session = Depends(get_db)) -> RosterOut:
    """status별 그룹 + 정렬된 명단, 조건부 참가자의 실질 마감일/조건 충족 여부, 정원 요약."""
    trip = _trip_or_404(db, trip_id)
    snapshot = load_snapshot(db, trip_id)
    return build_roster(trip, snapshot, datetime.now(timezone.utc))


@router.get(
    "/{trip_id}/participants/{user_id}/dependency-candidates",
    response_model=List[DependencyCandidateOut],
)
def get_dependency_candidates(trip_id: int, user_id: int, db: Session = Depends(get_db)):
    """
    조건 대상으로 고를 수 있는 참가자 목록 (본인 제외).
    mutual_dependency=True면 그 사람이 이미 나를 기다리는 중 → 고르면 서로 기다리게 됨.
    """
    _trip_or_404(db, trip_id)
    snapshot = load_snapshot(db, trip_id)
    me = next((p for p in snapshot if p.user_id == user_id), None)
    if me is None:
        raise HTTPException(status_code=404, detail="Participant not found")

    return [
        DependencyCandidateOut(
            user_id=p.user_id,
            display_name=p.display_name,
            confirmation_status=p.confirmation_status,
            is_confirmed=p.confirmation_status == CONFIRMED,
            mutual_dependency=is_mutually_dependent(p.user_id, me, snapshot),
        )
        for p in snapshot
        if p.user_id != user_id
    ]


@router.put("/{trip_id}/participants/{user_id}/confirmation", response_model=CommitmentUpdateOut)
async def put_confirmation(
    trip_id: int,
    user_id: int,
    body: CommitmentUpdateBody,
    db: Session = Depends(get_db),
):
    """
    참가자 본인의 상태 변경. 예외 시 rollback.

    정원 초과 / 상호 의존은 막지 않고 응답에 경고로만 포함.
    """
    now = datetime.now(timezone.utc)
    try:
        update_commitment(db, trip_id, user_id, body, now=now)
        # flush 후 같은 세션에서 전체 스냅샷 재조회 (경고 계산용)
        snapshot = load_snapshot(db, trip_id)
        trip = get_trip(db, trip_id)
        db.commit()  # ✅ 트랜잭션 소유권: 라우터
    except (ParticipantError, TripError) as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        db.rollback()
        logger.exception("failed to update confirmation", extra={"trip_id": trip_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Failed to update confirmation status")

    me = next(p for p in snapshot if p.user_id == user_id)
    warning = None
    if body.confirmation_status == CONFIRMED:
        others_confirmed = sum(1 for p in snapshot if p.user_id != user_id and p.confirmation_status == CONFIRMED)
        warning = capacity_warning(others_confirmed, trip.capacity_limit)
    mutual = mutual_dependency_ids(me, snapshot, me.conditional_user_ids)

    await publish_participants_changed(trip_id, user_id, body.confirmation_status)
    return CommitmentUpdateOut(
        participant=_participant_out(me, snapshot, now),
        capacity_warning=warning,
        mutual_dependency_user_ids=mutual,
    )


@router.get("/{trip_id}/roster/stream")
async def get_roster_stream(trip_id: int):
    """SSE: 해당 여행의 participants_changed 이벤트 실시간 스트림 (받으면 roster 재조회)."""
    return StreamingResponse(
        stream_participant_events(trip_id),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
