# 참가 확정 상태 변경 규칙: 검증 + 저장할 필드 정규화
# conditional → type != none, date/both → 날짜 필수, users/both → 사용자 1명 이상 필수
# confirmed → 약관 동의 필수
# conditional이 아니면 conditional_* 필드는 비움

from datetime import datetime
from typing import Any, Dict, Optional

from tripcommit.models.participant import ConditionalType, ConfirmationStatus
from tripcommit.schemas.participant import CommitmentUpdateBody

DATE_TYPES = {ConditionalType.DATE.value, ConditionalType.BOTH.value}
USER_TYPES = {ConditionalType.USERS.value, ConditionalType.BOTH.value}


def check_commitment_update(user_id: int, body: CommitmentUpdateBody) -> Optional[str]:
    """
    상태 변경 요청 검증. 통과하면 None, 아니면 HTTP 400용 메시지.
    상호 의존은 여기서 막지 않음 (응답에 경고로만 포함).
    """
    if body.confirmation_status == ConfirmationStatus.CONFIRMED.value and not body.agreed_to_terms:
        return "Please read and agree to the commitment terms before confirming."

    if body.confirmation_status != ConfirmationStatus.CONDITIONAL.value:
        return None

    if body.conditional_type == ConditionalType.NONE.value:
        return "Please select a condition type."
    if body.conditional_type in DATE_TYPES and body.conditional_date is None:
        return "A date is required for date conditions."
    if body.conditional_type in USER_TYPES and not body.conditional_user_ids:
        return "Select at least one person to wait on."
    if user_id in body.conditional_user_ids:
        return "You cannot wait on yourself."
    return None


def commitment_fields(
    body: CommitmentUpdateBody,
    current_status: Optional[str],
    current_confirmed_at: Optional[datetime],
    now: datetime,
) -> Dict[str, Any]:
    """TripParticipant에 반영할 컬럼 값. confirmed_at은 confirmed로 바뀌는 순간에만 설정."""
    fields: Dict[str, Any] = {
        "confirmation_status": body.confirmation_status,
        "confirmation_note": (body.confirmation_note or "").strip() or None,
        "updated_at": now,
    }

    if body.confirmation_status == ConfirmationStatus.CONFIRMED.value:
        already = current_status == ConfirmationStatus.CONFIRMED.value and current_confirmed_at is not None
        fields["confirmed_at"] = current_confirmed_at if already else now
    else:
        fields["confirmed_at"] = None

    if body.confirmation_status != ConfirmationStatus.CONDITIONAL.value:
        fields["conditional_type"] = ConditionalType.NONE.value
        fields["conditional_date"] = None
        fields["conditional_user_ids"] = None
    else:
        fields["conditional_type"] = body.conditional_type
        fields["conditional_date"] = body.conditional_date if body.conditional_type in DATE_TYPES else None
        # 중복 제거, 순서 유지
        user_ids = list(dict.fromkeys(body.conditional_user_ids)) if body.conditional_type in USER_TYPES else []
        fields["conditional_user_ids"] = user_ids or None

    return fields
