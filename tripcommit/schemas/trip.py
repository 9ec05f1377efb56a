# 여행 API 요청/응답 스키마

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tripcommit.schemas.participant import ParticipantOut

FillLevelLiteral = Literal["unlimited", "open", "filling", "full"]


class TripCreate(BaseModel):
    """여행 생성 요청. 확정 시스템은 기본 꺼짐."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    capacity_limit: Optional[int] = Field(default=None, ge=1)


class ConfirmationSettingsBody(BaseModel):
    """
    주최자의 확정 설정 저장 요청.

    enabled면 안내 메시지 필수. disabled면 나머지 값은 저장 시 비움.
    """

    confirmation_enabled: bool
    confirmation_message: Optional[str] = Field(default=None, max_length=2000)
    capacity_limit: Optional[int] = Field(default=None, ge=1)
    confirmation_deadline: Optional[datetime] = None

    @model_validator(mode="after")
    def _message_required_when_enabled(self) -> "ConfirmationSettingsBody":
        if self.confirmation_enabled and not (self.confirmation_message or "").strip():
            raise ValueError("confirmation_message is required when confirmations are enabled")
        return self


class TripResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    confirmation_enabled: bool = False
    confirmation_message: Optional[str] = None
    capacity_limit: Optional[int] = None
    confirmation_deadline: Optional[datetime] = None


class CapacityOut(BaseModel):
    """정원 요약 (권고용)."""

    capacity_limit: Optional[int] = None
    confirmed_count: int
    conditional_count: int
    waitlist_count: int
    is_full: bool
    spots_remaining: Optional[int] = None
    pipeline_total: int
    fill_level: FillLevelLiteral


class RosterSectionOut(BaseModel):
    status: str
    count: int
    participants: List[ParticipantOut]


class RosterOut(BaseModel):
    """GET /trips/{id}/roster 응답. sections는 화면 표시 순서."""

    trip_id: int
    confirmation_enabled: bool
    days_until_deadline: Optional[int] = None
    capacity: CapacityOut
    expanded_sections: List[str]
    sections: List[RosterSectionOut]
    counts: Dict[str, int]
