# 참가자 명단 그룹핑 + 그룹별 정렬 (화면 표시 / 정원 계산용 projection)
# 입력 스냅샷은 변경하지 않음. 스냅샷이 갱신될 때마다 다시 계산해도 안전.

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from tripcommit.models.participant import ConfirmationStatus
from tripcommit.schemas.participant import ParticipantRecord
from tripcommit.services.dependency_resolver import effective_deadline

# 결과에 항상 들어가는 버킷 (cancelled는 declined로 합침)
BUCKETS: Tuple[str, ...] = (
    ConfirmationStatus.PENDING.value,
    ConfirmationStatus.CONFIRMED.value,
    ConfirmationStatus.INTERESTED.value,
    ConfirmationStatus.CONDITIONAL.value,
    ConfirmationStatus.WAITLIST.value,
    ConfirmationStatus.DECLINED.value,
)

# 화면 섹션 순서 (confirmed 다음에 정원 cutoff 라인)
DISPLAY_ORDER: Tuple[str, ...] = (
    ConfirmationStatus.CONFIRMED.value,
    ConfirmationStatus.CONDITIONAL.value,
    ConfirmationStatus.WAITLIST.value,
    ConfirmationStatus.PENDING.value,
    ConfirmationStatus.INTERESTED.value,
    ConfirmationStatus.DECLINED.value,
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def bucket_for(participant: ParticipantRecord) -> str:
    status = participant.confirmation_status or ConfirmationStatus.PENDING.value
    if status == ConfirmationStatus.CANCELLED.value:
        return ConfirmationStatus.DECLINED.value
    return status


def _timestamp_key(value: Optional[datetime]) -> Tuple[bool, datetime]:
    # 값이 없으면 맨 뒤로
    return (value is None, value or _EPOCH)


def _conditional_keys(
    conditional: List[ParticipantRecord],
    all_participants: List[ParticipantRecord],
) -> Dict[int, Tuple[bool, datetime, str]]:
    # 비교마다 재귀 계산하지 않도록 참가자당 한 번만 계산
    keys: Dict[int, Tuple[bool, datetime, str]] = {}
    for p in conditional:
        deadline = effective_deadline(p, all_participants)
        if deadline is not None:
            keys[id(p)] = (False, deadline, "")
        else:
            keys[id(p)] = (True, _EPOCH, p.display_name.casefold())
    return keys


def group_and_order(all_participants: Iterable[ParticipantRecord]) -> Dict[str, List[ParticipantRecord]]:
    """
    status별 버킷으로 나누고 정렬.

    - confirmed: confirmed_at 오름차순 (선착순), 값 없으면 뒤
    - waitlist: updated_at 오름차순 (먼저 대기한 사람 먼저), 값 없으면 뒤
    - conditional: effective deadline 오름차순, 마감 있는 쪽 먼저, 둘 다 없으면 이름(대소문자 무시)
    - 나머지: 스냅샷 순서 유지
    """
    snapshot = list(all_participants)
    groups: Dict[str, List[ParticipantRecord]] = {status: [] for status in BUCKETS}

    for p in snapshot:
        groups.setdefault(bucket_for(p), []).append(p)

    confirmed = ConfirmationStatus.CONFIRMED.value
    waitlist = ConfirmationStatus.WAITLIST.value
    conditional = ConfirmationStatus.CONDITIONAL.value

    groups[confirmed].sort(key=lambda p: _timestamp_key(p.confirmed_at))
    groups[waitlist].sort(key=lambda p: _timestamp_key(p.updated_at))

    keys = _conditional_keys(groups[conditional], snapshot)
    groups[conditional].sort(key=lambda p: keys[id(p)])

    return groups
