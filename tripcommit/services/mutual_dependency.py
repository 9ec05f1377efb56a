# 상호 의존(circular) 경고: "이 사람을 고르면, 그 사람은 이미 나를 기다리고 있나?"
# 한 단계(직접 쌍)만 확인. A→B→C→A 같은 긴 순환은 잡지 않음.

from typing import Iterable, List

from tripcommit.models.participant import ConfirmationStatus
from tripcommit.schemas.participant import ParticipantRecord
from tripcommit.services.dependency_resolver import index_by_user


def is_mutually_dependent(
    candidate_id: int,
    self_participant: ParticipantRecord,
    all_participants: Iterable[ParticipantRecord],
) -> bool:
    """candidate가 conditional이고 conditional_user_ids에 self가 있으면 True."""
    candidate = index_by_user(all_participants).get(candidate_id)
    if candidate is None:
        return False
    return (
        candidate.confirmation_status == ConfirmationStatus.CONDITIONAL.value
        and self_participant.user_id in (candidate.conditional_user_ids or [])
    )


def mutual_dependency_ids(
    self_participant: ParticipantRecord,
    all_participants: Iterable[ParticipantRecord],
    candidate_ids: Iterable[int],
) -> List[int]:
    """candidate_ids 중 상호 의존이 되는 id (입력 순서 유지)."""
    snapshot = list(all_participants)
    return [cid for cid in candidate_ids if is_mutually_dependent(cid, self_participant, snapshot)]
