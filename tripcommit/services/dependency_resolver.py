# 조건부 확정 의존성 해석: effective deadline 계산, 조건 충족 여부 판정
#
# 입력은 항상 한 여행의 전체 참가자 스냅샷 (부분 delta 금지).
# 모든 함수는 순수 함수: DB/IO 없음, 예외를 던지지 않음 (렌더링마다 호출되므로).

from datetime import datetime, timezone
from typing import Dict, FrozenSet, Iterable, List, Optional

from tripcommit.models.participant import ConditionalType, ConfirmationStatus
from tripcommit.schemas.participant import ParticipantRecord, as_utc


def index_by_user(all_participants: Iterable[ParticipantRecord]) -> Dict[int, ParticipantRecord]:
    """user_id → 참가자. 같은 user_id가 여러 번 나오면 첫 번째를 사용."""
    index: Dict[int, ParticipantRecord] = {}
    for p in all_participants:
        index.setdefault(p.user_id, p)
    return index


def effective_conditional_type(participant: ParticipantRecord) -> str:
    """status가 conditional이 아니면 저장된 conditional_type과 무관하게 none."""
    if participant.confirmation_status != ConfirmationStatus.CONDITIONAL.value:
        return ConditionalType.NONE.value
    return participant.conditional_type or ConditionalType.NONE.value


def _deadline(
    participant: ParticipantRecord,
    index: Dict[int, ParticipantRecord],
    path: FrozenSet[int],
) -> Optional[datetime]:
    if effective_conditional_type(participant) == ConditionalType.NONE.value:
        return None

    # path는 호출마다 새 frozenset으로 확장 → 형제 분기끼리 공유하지 않음
    path = path | {participant.user_id}
    dates: List[datetime] = []

    if participant.conditional_date is not None:
        dates.append(participant.conditional_date)

    for user_id in participant.conditional_user_ids or []:
        if user_id in path:
            continue
        dep = index.get(user_id)
        if dep is None:
            continue
        dep_deadline = _deadline(dep, index, path)
        if dep_deadline is not None:
            dates.append(dep_deadline)

    if not dates:
        return None
    # 체인에서 가장 늦은 날짜 (가장 비관적인 마감)
    return max(dates)


def effective_deadline(
    participant: ParticipantRecord,
    all_participants: Iterable[ParticipantRecord],
) -> Optional[datetime]:
    """
    조건부 참가자의 실질 마감일.

    - 본인의 conditional_date + 기다리는 참가자들의 실질 마감일(재귀) 중 최댓값.
    - 순환 방지: 현재 경로(path)에 이미 있는 참가자는 건너뜀. 경로는 분기마다 복사되므로
      다이아몬드형 의존(A→B→D, A→C→D)에서는 D가 양쪽 분기에서 각각 계산됨.
    - 스냅샷에 없는 user_id는 기여 없음.
    """
    return _deadline(participant, index_by_user(all_participants), frozenset())


def conditions_met(
    participant: ParticipantRecord,
    all_participants: Iterable[ParticipantRecord],
    now: Optional[datetime] = None,
) -> bool:
    """
    조건 충족 여부 (재귀 아님: 기다리는 사람들의 현재 status만 확인).

    - date: 현재 시각 >= conditional_date
    - users: 목록의 모든 사용자가 confirmed (스냅샷에 없으면 미충족)
    - both: 둘 다 충족
    충족돼도 상태를 자동으로 confirmed로 바꾸지 않음 (권고용).
    """
    conditional_type = effective_conditional_type(participant)
    if conditional_type == ConditionalType.NONE.value:
        return False

    now = datetime.now(timezone.utc) if now is None else as_utc(now)

    date_met = True
    if participant.conditional_date is not None:
        date_met = now >= participant.conditional_date

    users_met = True
    if participant.conditional_user_ids:
        index = index_by_user(all_participants)
        users_met = all(
            user_id in index
            and index[user_id].confirmation_status == ConfirmationStatus.CONFIRMED.value
            for user_id in participant.conditional_user_ids
        )

    if conditional_type == ConditionalType.BOTH.value:
        return date_met and users_met
    if conditional_type == ConditionalType.DATE.value:
        return date_met
    if conditional_type == ConditionalType.USERS.value:
        return users_met
    return False
