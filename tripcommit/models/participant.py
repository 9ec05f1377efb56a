# TripParticipant 모델: 여행 참가자와 참가 확정 상태

from enum import Enum as PyEnum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tripcommit.models.base import Base


class ConfirmationStatus(str, PyEnum):
    """참가 확정 상태. CANCELLED는 화면에서 DECLINED와 같은 그룹으로 묶음."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    INTERESTED = "interested"
    CONDITIONAL = "conditional"
    WAITLIST = "waitlist"
    DECLINED = "declined"
    CANCELLED = "cancelled"


class ConditionalType(str, PyEnum):
    """조건부 확정의 조건 종류. status가 conditional일 때만 의미 있음."""

    NONE = "none"
    DATE = "date"
    USERS = "users"
    BOTH = "both"


class ParticipantRole(str, PyEnum):
    ORGANIZER = "organizer"
    PARTICIPANT = "participant"


# DB에는 String으로 저장 (마이그레이션 단순화). 앱에서는 Enum으로 비교.
STATUS_DEFAULT = ConfirmationStatus.PENDING.value
CONDITIONAL_DEFAULT = ConditionalType.NONE.value


class TripParticipant(Base):
    """참가자 테이블. (trip, user) 1:1. conditional_user_ids는 기다리는 다른 참가자의 user_id 목록."""

    __tablename__ = "trip_participants"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default=ParticipantRole.PARTICIPANT.value)
    confirmation_status = Column(String(20), nullable=False, default=STATUS_DEFAULT, server_default=STATUS_DEFAULT)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)  # confirmed로 바뀔 때만 설정
    confirmation_note = Column(Text, nullable=True)
    conditional_type = Column(String(10), nullable=False, default=CONDITIONAL_DEFAULT, server_default=CONDITIONAL_DEFAULT)
    conditional_date = Column(DateTime(timezone=True), nullable=True)
    conditional_user_ids = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())  # 대기자 FIFO 정렬 기준

    trip = relationship("Trip", back_populates="participants")
    user = relationship("User", lazy="joined")

    __table_args__ = (UniqueConstraint("trip_id", "user_id", name="uq_trip_participant_trip_user"),)
