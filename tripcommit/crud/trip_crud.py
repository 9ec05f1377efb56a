# 여행 생성/조회, 확정 설정 CRUD

import logging

from sqlalchemy.orm import Session

from tripcommit.models.trip import Trip
from tripcommit.schemas.trip import ConfirmationSettingsBody, TripCreate

logger = logging.getLogger(__name__)


class TripError(Exception):
    """여행 처리 불가 (여행 없음 등)."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code


def get_trip(db: Session, trip_id: int) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if trip is None:
        raise TripError("Trip not found", 404)
    return trip


def create_trip(db: Session, body: TripCreate) -> Trip:
    """⚠️ commit은 호출자가."""
    trip = Trip(name=body.name, description=body.description, capacity_limit=body.capacity_limit)
    db.add(trip)
    db.flush()
    return trip


def update_confirmation_settings(db: Session, trip_id: int, body: ConfirmationSettingsBody) -> Trip:
    """
    확정 설정 저장. 꺼지면 메시지/정원/마감은 NULL로 비움.

    ⚠️ commit은 호출자가.
    """
    trip = get_trip(db, trip_id)
    enabled = body.confirmation_enabled
    trip.confirmation_enabled = enabled
    trip.confirmation_message = body.confirmation_message.strip() if enabled and body.confirmation_message else None
    trip.capacity_limit = body.capacity_limit if enabled else None
    trip.confirmation_deadline = body.confirmation_deadline if enabled else None
    db.flush()

    logger.info(
        "confirmation settings updated",
        extra={"trip_id": trip_id, "confirmation_enabled": enabled, "capacity_limit": trip.capacity_limit},
    )
    return trip
