# Trip 모델: 여행 엔티티 + 참가 확정(confirmation) 설정

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tripcommit.models.base import Base


class Trip(Base):
    """여행 테이블. capacity_limit가 NULL이면 정원 제한 없음."""

    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    # 확정 시스템: 주최자가 켜야 참가자가 상태를 바꿀 수 있음
    confirmation_enabled = Column(Boolean, nullable=False, default=False, server_default=false())
    confirmation_message = Column(Text, nullable=True)
    capacity_limit = Column(Integer, nullable=True)  # 최대 확정 인원 (권고용, 서버에서 강제하지 않음)
    confirmation_deadline = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    participants = relationship(
        "TripParticipant",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="TripParticipant.id",
    )
