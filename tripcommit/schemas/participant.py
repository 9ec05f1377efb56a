# 참가자 스냅샷 / 참가 확정 요청·응답 스키마

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ConfirmationStatusLiteral = Literal[
    "pending", "confirmed", "interested", "conditional", "waitlist", "declined", "cancelled"
]
ConditionalTypeLiteral = Literal["none", "date", "users", "both"]
ParticipantRoleLiteral = Literal["organizer", "participant"]


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """naive datetime은 UTC로 간주 (sqlite는 tzinfo를 저장하지 않음)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ParticipantRecord(BaseModel):
    """
    확정 엔진 입력용 참가자 스냅샷 한 행.

    표시 이름(full_name/email) 외의 사용자 속성(아바타 등)은 엔진과 무관하므로 포함하지 않음.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    user_id: int
    trip_id: int
    role: ParticipantRoleLiteral = "participant"
    confirmation_status: ConfirmationStatusLiteral = "pending"
    confirmed_at: Optional[datetime] = None
    confirmation_note: Optional[str] = None
    conditional_type: ConditionalTypeLiteral = "none"
    conditional_date: Optional[datetime] = None
    conditional_user_ids: List[int] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
    full_name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("confirmation_status", mode="before")
    @classmethod
    def _default_status(cls, v):
        return v or "pending"

    @field_validator("conditional_type", mode="before")
    @classmethod
    def _default_conditional_type(cls, v):
        return v or "none"

    @field_validator("conditional_user_ids", mode="before")
    @classmethod
    def _default_user_ids(cls, v):
        return v or []

    @field_validator("confirmed_at", "conditional_date", "updated_at")
    @classmethod
    def _normalize_tz(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or ""


class ParticipantAddBody(BaseModel):
    """여행에 기존 사용자를 pending 참가자로 추가."""

    user_id: int
    role: ParticipantRoleLiteral = "participant"


class CommitmentUpdateBody(BaseModel):
    """
    참가자 본인의 상태 변경 요청.

    conditional이 아니면 conditional_* 필드는 무시되고 서버에서 비움.
    confirmed로 바꿀 때는 agreed_to_terms=True 필요.
    """

    confirmation_status: ConfirmationStatusLiteral
    confirmation_note: Optional[str] = Field(default=None, max_length=1000)
    conditional_type: ConditionalTypeLiteral = "none"
    conditional_date: Optional[datetime] = None
    conditional_user_ids: List[int] = Field(default_factory=list)
    agreed_to_terms: bool = False


class ParticipantOut(BaseModel):
    """참가자 응답. 조건부 참가자는 effective_deadline / conditions_met 포함."""

    user_id: int
    role: ParticipantRoleLiteral
    display_name: str
    confirmation_status: ConfirmationStatusLiteral
    confirmed_at: Optional[datetime] = None
    confirmation_note: Optional[str] = None
    conditional_type: ConditionalTypeLiteral = "none"
    conditional_date: Optional[datetime] = None
    conditional_user_ids: List[int] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
    effective_deadline: Optional[datetime] = None
    conditions_met: Optional[bool] = None


class CommitmentUpdateOut(BaseModel):
    """상태 변경 결과. warnings는 권고용 (정원 초과, 상호 의존)."""

    participant: ParticipantOut
    capacity_warning: Optional[str] = None
    mutual_dependency_user_ids: List[int] = Field(default_factory=list)


class DependencyCandidateOut(BaseModel):
    """조건 대상으로 고를 수 있는 참가자. mutual_dependency=True면 이미 나를 기다리는 중."""

    user_id: int
    display_name: str
    confirmation_status: ConfirmationStatusLiteral
    is_confirmed: bool
    mutual_dependency: bool
