# 참가자 스냅샷 조회 / 참가자 추가 / 참가 확정 상태 변경 CRUD
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tripcommit.models.participant import TripParticipant
from tripcommit.models.trip import Trip
from tripcommit.models.user import User
from tripcommit.schemas.participant import CommitmentUpdateBody, ParticipantRecord
from tripcommit.services.commitment_update import check_commitment_update, commitment_fields

logger = logging.getLogger(__name__)


class ParticipantError(Exception):
    """참가자 처리 불가 (여행/참가자 없음, 중복 참가, 잘못된 상태 변경 등)."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code


def to_record(row: TripParticipant) -> ParticipantRecord:
    """ORM 행 → 엔진 입력용 스냅샷. 표시 이름은 user에서 평탄화."""
    return ParticipantRecord(
        user_id=row.user_id,
        trip_id=row.trip_id,
        role=row.role,
        confirmation_status=row.confirmation_status,
        confirmed_at=row.confirmed_at,
        confirmation_note=row.confirmation_note,
        conditional_type=row.conditional_type,
        conditional_date=row.conditional_date,
        conditional_user_ids=row.conditional_user_ids,
        updated_at=row.updated_at,
        full_name=row.user.full_name if row.user else None,
        email=row.user.email if row.user else None,
    )


def load_snapshot(db: Session, trip_id: int) -> List[ParticipantRecord]:
    """
    한 여행의 전체 참가자 스냅샷.

    엔진은 항상 전체 스냅샷으로 계산해야 함 (부분 목록이면 의존 대상이 "없음"으로 처리되어 결과가 틀어짐).
    """
    rows = (
        db.query(TripParticipant)
        .filter(TripParticipant.trip_id == trip_id)
        .order_by(TripParticipant.id)
        .all()
    )
    return [to_record(r) for r in rows]


def get_participant(db: Session, trip_id: int, user_id: int) -> Optional[TripParticipant]:
    return (
        db.query(TripParticipant)
        .filter(
            TripParticipant.trip_id == trip_id,
            TripParticipant.user_id == user_id,
        )
        .first()
    )


def add_participant(db: Session, trip_id: int, user_id: int, role: str) -> TripParticipant:
    """
    기존 사용자를 pending 참가자로 추가.

    ⚠️ 이 함수는 commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    if db.query(User).filter(User.id == user_id).first() is None:
        raise ParticipantError("User not found", 404)
    if db.query(Trip).filter(Trip.id == trip_id).first() is None:
        raise ParticipantError("Trip not found", 404)
    if get_participant(db, trip_id, user_id) is not None:
        raise ParticipantError("Already a participant of this trip", 400)

    participant = TripParticipant(trip_id=trip_id, user_id=user_id, role=role)
    try:
        db.add(participant)
        db.flush()
    except IntegrityError:
        # 동시에 같은 user를 추가하면 UniqueConstraint 위반 가능
        raise ParticipantError("Already a participant of this trip", 400)
    return participant


def update_commitment(
    db: Session,
    trip_id: int,
    user_id: int,
    body: CommitmentUpdateBody,
    now: Optional[datetime] = None,
) -> TripParticipant:
    """
    참가자 본인의 상태 변경 (한 번에 한 행).

    - 확정 시스템이 꺼진 여행이면 409
    - FOR UPDATE로 참가자 행 잠금
    - 정원이 차 있어도 막지 않음 (경고는 라우터가 응답에 포함)

    ⚠️ 이 함수는 commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if trip is None:
        raise ParticipantError("Trip not found", 404)
    if not trip.confirmation_enabled:
        raise ParticipantError("Confirmations are not enabled for this trip", 409)

    participant = (
        db.query(TripParticipant)
        .filter(
            TripParticipant.trip_id == trip_id,
            TripParticipant.user_id == user_id,
        )
        .with_for_update()
        .first()
    )
    if participant is None:
        raise ParticipantError("Participant not found", 404)

    error = check_commitment_update(user_id, body)
    if error is not None:
        raise ParticipantError(error, 400)

    fields = commitment_fields(
        body,
        participant.confirmation_status,
        participant.confirmed_at,
        now or datetime.now(timezone.utc),
    )
    for column, value in fields.items():
        setattr(participant, column, value)
    db.flush()

    logger.info(
        "commitment updated",
        extra={"trip_id": trip_id, "user_id": user_id, "status": body.confirmation_status},
    )
    return participant
